# marketplace/services/order_service.py
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from marketplace.data.models.order import OrderModel
from marketplace.domain.enums import OrderStatus, ORDER_TRANSITIONS
from marketplace.domain.errors import InvalidRequest, NotFound, Conflict
from marketplace.repos.order_repo import OrderRepo
from marketplace.repos.user_repo import UserRepo
from marketplace.utils.pagination import page_window
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """
    Serwis odpowiedzialny za domene zamowien (historia kupujacego, panel admina).
    Zamowienia tworzy wylacznie CheckoutService.
    """

    def __init__(self, db: Session):
        self.repo = OrderRepo(db)
        self.users = UserRepo(db)

    def list_for_buyer(self, user_id: int) -> List[OrderModel]:
        """
        Use Case: Historia zamowien kupujacego (Query), najnowsze pierwsze.
        """
        return self.repo.list_for_buyer(user_id)

    def list_for_admin(
        self,
        status: str | None,
        search: str | None,
        page: int,
        limit: int,
    ) -> Dict[str, Any]:
        if status and status not in OrderStatus.__members__:
            raise InvalidRequest("Invalid status")

        page, limit, offset = page_window(page, limit)
        orders, total = self.repo.search(status=status, search=search, offset=offset, limit=limit)

        #sprzedawcy dociagani jednym zapytaniem
        seller_ids = {o.product.seller_id for o in orders if o.product is not None}
        sellers = {u.id: u for u in self.users.list_by_ids(list(seller_ids))}

        return {
            "orders": [
                {
                    "id": o.id,
                    "user_id": o.user_id,
                    "product_id": o.product_id,
                    "status": o.status,
                    "product_name": o.product_name,
                    "unit_price": o.unit_price,
                    "created_at": o.created_at,
                    "product": o.product,
                    "user": o.user,
                    "seller": sellers.get(o.product.seller_id) if o.product is not None else None,
                }
                for o in orders
            ],
            "total": total,
            "page": page,
        }

    def set_status(self, order_id: int, new_status: str) -> OrderModel:
        """
        Use Case: Zmiana statusu zamowienia przez admina (Command).
        PENDING -> COMPLETED | CANCELLED, statusy koncowe sa terminalne.
        """
        if new_status not in OrderStatus.__members__:
            raise InvalidRequest("Invalid status")

        order = self.repo.get_order(order_id)
        if not order:
            raise NotFound("Order not found")

        current = OrderStatus(order.status)
        target = OrderStatus(new_status)

        if current == target:
            return order

        if target not in ORDER_TRANSITIONS[current]:
            raise Conflict(f"Cannot change order status from {current.value} to {target.value}")

        updated = self.repo.update_order_status(order, target.value)
        logger.info(f"Order {order_id} status changed {current.value} -> {target.value}")
        return updated
