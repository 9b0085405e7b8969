# marketplace/services/notification_service.py
from marketplace.celery_worker import celery_app
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Serwis do wysylania powiadomien o zamowieniach.
    Uzywa Celery do asynchronicznego przetwarzania.
    """

    @staticmethod
    def send_order_notification(user_id: int, order_id: int, product_id: int):
        send_order_notification_task.delay(user_id, order_id, product_id)


@celery_app.task(name="marketplace.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: int, order_id: int, product_id: int):
    """
    Celery task - powiadomienie kupujacego i sprzedawcy.
    Na razie tylko loguje.
    """
    logger.info(f"[NOTIFICATION] User {user_id}: order {order_id} for product {product_id} is pending")
    return {"user_id": user_id, "order_id": order_id, "product_id": product_id, "status": "sent"}
