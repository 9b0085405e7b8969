# marketplace/repos/order_repo.py
from typing import List, Sequence

from sqlalchemy import select, func, or_, exists
from sqlalchemy.orm import Session, aliased

from marketplace.data.models.order import OrderModel
from marketplace.data.models.product import ProductModel
from marketplace.data.models.user import UserModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_order(self, order: OrderModel) -> OrderModel:
        # bez commita - zamowienie jest czescia transakcji checkoutu
        self.db.add(order)
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def list_for_buyer(self, user_id: int) -> List[OrderModel]:
        return list(
            self.db.execute(
                select(OrderModel)
                .where(OrderModel.user_id == user_id)
                .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
            ).unique().scalars().all()
        )

    def search(
        self,
        status: str | None,
        search: str | None,
        offset: int,
        limit: int,
    ) -> tuple[List[OrderModel], int]:
        """Zamowienia dla admina: szukanie po produkcie, kupujacym i sprzedawcy."""
        conditions = []
        if status:
            conditions.append(OrderModel.status == status)
        if search:
            buyer = aliased(UserModel)
            seller = aliased(UserModel)
            product = aliased(ProductModel)
            conditions.append(
                or_(
                    exists().where(
                        product.id == OrderModel.product_id,
                        product.name.icontains(search, autoescape=True),
                    ),
                    exists().where(
                        buyer.id == OrderModel.user_id,
                        or_(
                            buyer.name.icontains(search, autoescape=True),
                            buyer.email.icontains(search, autoescape=True),
                        ),
                    ),
                    exists().where(
                        product.id == OrderModel.product_id,
                        seller.id == product.seller_id,
                        or_(
                            seller.name.icontains(search, autoescape=True),
                            seller.email.icontains(search, autoescape=True),
                        ),
                    ),
                )
            )

        orders = self.db.execute(
            select(OrderModel)
            .where(*conditions)
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
            .offset(offset)
            .limit(limit)
        ).unique().scalars().all()
        total = self.db.execute(select(func.count(OrderModel.id)).where(*conditions)).scalar_one()
        return list(orders), total

    def count_by_buyer(self, user_ids: Sequence[int]) -> dict[int, int]:
        if not user_ids:
            return {}
        rows = self.db.execute(
            select(OrderModel.user_id, func.count(OrderModel.id))
            .where(OrderModel.user_id.in_(user_ids))
            .group_by(OrderModel.user_id)
        ).all()
        return {user_id: count for user_id, count in rows}

    def has_orders_for_product(self, product_id: int) -> bool:
        return self.db.execute(
            select(exists().where(OrderModel.product_id == product_id))
        ).scalar()

    def count_orders(self) -> int:
        return self.db.execute(select(func.count(OrderModel.id))).scalar_one()

    def update_order_status(self, order: OrderModel, status: str) -> OrderModel:
        order.status = status
        self.db.commit()
        self.db.refresh(order)
        return order

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
