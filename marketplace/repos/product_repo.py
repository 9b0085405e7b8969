# marketplace/repos/product_repo.py
from typing import List, Sequence

from sqlalchemy import select, update, func, or_
from sqlalchemy.orm import Session

from marketplace.data.models.product import ProductModel
from marketplace.domain.enums import ProductStatus


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def get_seller_product(self, product_id: int, seller_id: int) -> ProductModel | None:
        return self.db.execute(
            select(ProductModel).where(
                ProductModel.id == product_id,
                ProductModel.seller_id == seller_id,
            )
        ).scalar_one_or_none()

    def list_by_ids(self, product_ids: Sequence[int]) -> List[ProductModel]:
        if not product_ids:
            return []
        return list(
            self.db.execute(
                select(ProductModel).where(ProductModel.id.in_(product_ids))
            ).scalars().all()
        )

    def list_active_by_ids(self, product_ids: Sequence[int]) -> List[ProductModel]:
        return [p for p in self.list_by_ids(product_ids) if p.status == ProductStatus.ACTIVE.value]

    def list_by_seller(self, seller_id: int) -> List[ProductModel]:
        return list(
            self.db.execute(
                select(ProductModel)
                .where(ProductModel.seller_id == seller_id)
                .order_by(ProductModel.created_at.desc(), ProductModel.id.desc())
            ).scalars().all()
        )

    def search(
        self,
        status: str | None,
        category: str | None,
        search: str | None,
        search_category: bool,
        offset: int,
        limit: int,
    ) -> tuple[List[ProductModel], int]:
        """Lista produktow + total, wspolna dla przegladania i panelu admina."""
        conditions = []
        if status:
            conditions.append(ProductModel.status == status)
        if category:
            conditions.append(ProductModel.category == category)
        if search:
            fields = [ProductModel.name, ProductModel.description]
            if search_category:
                fields.append(ProductModel.category)
            conditions.append(or_(*[f.icontains(search, autoescape=True) for f in fields]))

        stmt = (
            select(ProductModel)
            .where(*conditions)
            .order_by(ProductModel.created_at.desc(), ProductModel.id.desc())
            .offset(offset)
            .limit(limit)
        )
        total = self.db.execute(
            select(func.count(ProductModel.id)).where(*conditions)
        ).scalar_one()
        return list(self.db.execute(stmt).scalars().all()), total

    def mark_sold(self, product_ids: Sequence[int]) -> int:
        """
        Warunkowy update (compare-and-swap): ACTIVE -> SOLD.
        Zwraca liczbe faktycznie zmienionych wierszy, caller porownuje z oczekiwana.
        """
        result = self.db.execute(
            update(ProductModel)
            .where(
                ProductModel.id.in_(product_ids),
                ProductModel.status == ProductStatus.ACTIVE.value,
            )
            .values(status=ProductStatus.SOLD.value)
            .execution_options(synchronize_session="evaluate")
        )
        return result.rowcount

    def count_by_seller(self, seller_ids: Sequence[int]) -> dict[int, int]:
        if not seller_ids:
            return {}
        rows = self.db.execute(
            select(ProductModel.seller_id, func.count(ProductModel.id))
            .where(ProductModel.seller_id.in_(seller_ids))
            .group_by(ProductModel.seller_id)
        ).all()
        return {seller_id: count for seller_id, count in rows}

    def count_by_status(self) -> List[tuple[str, int]]:
        return list(
            self.db.execute(
                select(ProductModel.status, func.count(ProductModel.id))
                .group_by(ProductModel.status)
                .order_by(ProductModel.status)
            ).all()
        )

    def top_categories(self, limit: int = 5) -> List[tuple[str, int]]:
        count = func.count(ProductModel.id)
        return list(
            self.db.execute(
                select(ProductModel.category, count)
                .group_by(ProductModel.category)
                .order_by(count.desc(), ProductModel.category)
                .limit(limit)
            ).all()
        )

    def add_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.flush()
        return product

    def delete_product(self, product: ProductModel) -> None:
        self.db.delete(product)

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
