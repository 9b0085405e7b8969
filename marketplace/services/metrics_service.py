# marketplace/services/metrics_service.py
from sqlalchemy.orm import Session

from marketplace.repos.order_repo import OrderRepo
from marketplace.repos.product_repo import ProductRepo
from marketplace.repos.user_repo import UserRepo


class MetricsService:
    """Statystyki dla panelu admina."""

    def __init__(self, db: Session):
        self.products = ProductRepo(db)
        self.users = UserRepo(db)
        self.orders = OrderRepo(db)

    def get_metrics(self) -> dict:
        return {
            "product_totals": [
                {"status": status, "count": count} for status, count in self.products.count_by_status()
            ],
            "users_count": self.users.count_users(),
            "orders_count": self.orders.count_orders(),
            "top_categories": [
                {"category": category, "count": count} for category, count in self.products.top_categories(5)
            ],
        }
