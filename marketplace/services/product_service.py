# marketplace/services/product_service.py
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from marketplace.data.models.product import ProductModel
from marketplace.domain.enums import ProductStatus, SELLER_SETTABLE_STATUSES
from marketplace.domain.errors import InvalidRequest, NotFound, Conflict
from marketplace.domain.schemas import ProductCreateIn, ProductUpdateIn
from marketplace.repos.order_repo import OrderRepo
from marketplace.repos.product_repo import ProductRepo
from marketplace.utils.pagination import page_window, pagination_info
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)


class ProductService:
    """
    Katalog produktow.
    - sprzedawca: wystawianie, edycja i usuwanie wlasnych produktow (dopoki nie SOLD)
    - kupujacy: przegladanie aktywnych produktow
    - admin: moderacja statusu i pol, bez ograniczen
    """

    def __init__(self, db: Session):
        self.repo = ProductRepo(db)
        self.orders = OrderRepo(db)

    # =====================================================
    # SELLER
    # =====================================================
    def create_product(self, seller_id: int, payload: ProductCreateIn) -> ProductModel:
        product = ProductModel(
            seller_id=seller_id,
            name=payload.name,
            description=payload.description,
            category=payload.category,
            price=payload.price,
            image_url=payload.image_url,
            status=ProductStatus.UNDER_REVIEW.value,
        )
        self.repo.add_product(product)
        self.repo.commit()

        logger.info(f"Produkt {product.id} wystawiony przez sprzedawce {seller_id}, czeka na akceptacje")
        return product

    def list_my_products(self, seller_id: int) -> List[ProductModel]:
        return self.repo.list_by_seller(seller_id)

    def _get_own_unsold(self, product_id: int, seller_id: int) -> ProductModel:
        product = self.repo.get_seller_product(product_id, seller_id)
        if not product:
            raise NotFound("Product not found or you don't have permission")
        if product.status == ProductStatus.SOLD.value:
            raise Conflict("Sold products cannot be modified")
        return product

    def update_product(self, product_id: int, seller_id: int, payload: ProductUpdateIn) -> ProductModel:
        product = self._get_own_unsold(product_id, seller_id)

        changes = payload.model_dump(exclude_none=True)
        status = changes.pop("status", None)

        if status is not None:
            # sprzedawca moze tylko wlaczyc/wylaczyc ogloszenie, i to po akceptacji admina
            if status not in SELLER_SETTABLE_STATUSES or product.status not in {
                s.value for s in SELLER_SETTABLE_STATUSES
            }:
                raise Conflict(f"Cannot change product status from {product.status} to {status.value}")
            product.status = status.value

        for field, value in changes.items():
            setattr(product, field, value)

        self.repo.commit()
        logger.info(f"Produkt {product_id} zaktualizowany przez sprzedawce {seller_id}")
        return product

    def delete_product(self, product_id: int, seller_id: int) -> None:
        product = self._get_own_unsold(product_id, seller_id)
        if self.orders.has_orders_for_product(product_id):
            raise Conflict("Products with orders cannot be deleted")
        self.repo.delete_product(product)
        self.repo.commit()
        logger.info(f"Produkt {product_id} usuniety przez sprzedawce {seller_id}")

    # =====================================================
    # BROWSE
    # =====================================================
    def browse(self, category: str | None, search: str | None, page: int, limit: int) -> Dict[str, Any]:
        page, limit, offset = page_window(page, limit)
        products, total = self.repo.search(
            status=ProductStatus.ACTIVE.value,
            category=category,
            search=search,
            search_category=False,
            offset=offset,
            limit=limit,
        )
        return {"products": products, "pagination": pagination_info(page, limit, total)}

    def get_product(self, product_id: int) -> ProductModel:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFound("Product not found")
        return product

    # =====================================================
    # ADMIN
    # =====================================================
    def admin_list(self, status: str | None, search: str | None, page: int, limit: int) -> Dict[str, Any]:
        if status and status not in ProductStatus.__members__:
            raise InvalidRequest("Invalid status")
        page, limit, offset = page_window(page, limit)
        products, total = self.repo.search(
            status=status,
            category=None,
            search=search,
            search_category=True,
            offset=offset,
            limit=limit,
        )
        return {"products": products, "total": total, "page": page}

    def admin_set_status(self, product_id: int, status: str) -> ProductModel:
        if status not in ProductStatus.__members__:
            raise InvalidRequest("Invalid status")
        product = self.get_product(product_id)
        previous = product.status
        product.status = status
        self.repo.commit()
        logger.info(f"Admin changed product {product_id} status {previous} -> {status}")
        return product

    def admin_update_fields(self, product_id: int, payload: ProductUpdateIn) -> ProductModel:
        product = self.get_product(product_id)
        changes = payload.model_dump(exclude_none=True, exclude={"status"})
        for field, value in changes.items():
            setattr(product, field, value)
        self.repo.commit()
        return product
