# marketplace/services/checkout_service.py
from typing import List, Sequence
from uuid import uuid4

from sqlalchemy.orm import Session

from marketplace.data.models.order import OrderModel
from marketplace.domain.enums import ProductStatus, OrderStatus
from marketplace.domain.errors import InvalidRequest, NotFound, Conflict
from marketplace.repos.order_repo import OrderRepo
from marketplace.repos.product_repo import ProductRepo
from marketplace.repos.user_repo import UserRepo
from marketplace.services.lock_service import LockService
from marketplace.services.notification_service import NotificationService
from marketplace.utils.settings import CHECKOUT_LOCK_TTL_SECONDS
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)

UNAVAILABLE_MESSAGE = "Some products are not available"


class CheckoutService:
    """
    Zakup produktow z koszyka.

    Requested -> Validated -> Committed  albo  Requested -> Rejected.
    Walidacja i zapis w jednej transakcji:
    1. walidacja - wszystkie produkty istnieja i sa ACTIVE, inaczej Conflict
    2. jedno zamowienie PENDING na produkt (ze snapshotem nazwy i ceny)
    3. warunkowy update ACTIVE -> SOLD, mniej zmienionych wierszy = rollback + Conflict
    4. usuniecie kupionych ID z koszyka, reszta koszyka bez zmian
    """

    def __init__(
        self,
        db: Session,
        product_repo: ProductRepo | None = None,
        order_repo: OrderRepo | None = None,
        user_repo: UserRepo | None = None,
        lock_service: LockService | None = None,
        notification_service: NotificationService | None = None,
    ):
        self.db = db
        self.products = product_repo or ProductRepo(db)
        self.orders = order_repo or OrderRepo(db)
        self.users = user_repo or UserRepo(db)
        # brak lock_service = tylko gwarancja z bazy
        self.lock_service = lock_service
        self.notification_service = notification_service or NotificationService()

    @staticmethod
    def _normalize(product_ids: Sequence[int] | None) -> List[int]:
        if not product_ids:
            raise InvalidRequest("Product IDs are required")
        ids = list(product_ids)
        if len(set(ids)) != len(ids):
            raise InvalidRequest("Product IDs must be distinct")
        return ids

    def checkout(self, user_id: int, product_ids: Sequence[int] | None) -> List[OrderModel]:
        ids = self._normalize(product_ids)
        # token per checkout, drugi checkout tego samego kupujacego nie zwolni cudzego locka
        lock_owner = uuid4().hex

        if self.lock_service is not None:
            if not self.lock_service.acquire_many(ids, lock_owner, CHECKOUT_LOCK_TTL_SECONDS):
                logger.info(f"Checkout for user {user_id} rejected: products {ids} locked by another checkout")
                raise Conflict(UNAVAILABLE_MESSAGE)

        try:
            orders = self._validate_and_commit(user_id, ids)
        finally:
            if self.lock_service is not None:
                self.lock_service.release_many(ids, lock_owner)

        logger.info(f"Checkout for user {user_id} committed: orders {[o.id for o in orders]}")
        self._notify(user_id, orders)
        return orders

    def _validate_and_commit(self, user_id: int, ids: List[int]) -> List[OrderModel]:
        try:
            # Validate
            products = self.products.list_by_ids(ids)
            if len(products) != len(ids) or any(p.status != ProductStatus.ACTIVE.value for p in products):
                logger.info(f"Checkout for user {user_id} rejected: some of {ids} are not available")
                raise Conflict(UNAVAILABLE_MESSAGE)

            user = self.users.get_user_for_update(user_id)
            if not user:
                raise NotFound("User not found")

            # Commit - zamowienia w kolejnosci z requestu
            by_id = {p.id: p for p in products}
            orders = [
                self.orders.add_order(
                    OrderModel(
                        user_id=user_id,
                        product_id=pid,
                        status=OrderStatus.PENDING.value,
                        product_name=by_id[pid].name,
                        unit_price=by_id[pid].price,
                    )
                )
                for pid in ids
            ]

            # compare-and-swap, ktos mogl kupic produkt miedzy walidacja a zapisem
            changed = self.products.mark_sold(ids)
            if changed != len(ids):
                logger.warning(
                    f"Checkout for user {user_id} lost race: marked {changed} of {len(ids)} products as sold"
                )
                raise Conflict(UNAVAILABLE_MESSAGE)

            self.users.set_cart(user, [pid for pid in (user.cart or []) if pid not in by_id])

            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        for order in orders:
            self.db.refresh(order)
        return orders

    def _notify(self, user_id: int, orders: List[OrderModel]):
        for order in orders:
            try:
                self.notification_service.send_order_notification(user_id, order.id, order.product_id)
            except Exception as e:
                # zamowienie juz zapisane, powiadomienie nie moze go cofnac
                logger.warning(f"Failed to queue notification for order {order.id}: {e}")
