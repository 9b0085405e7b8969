from typing import Any, Dict

from sqlalchemy.orm import Session

from marketplace.data.models.user import UserModel
from marketplace.domain.enums import Role
from marketplace.domain.errors import InvalidRequest, NotFound, Conflict
from marketplace.domain.schemas import ProfileUpdateIn
from marketplace.repos.order_repo import OrderRepo
from marketplace.repos.product_repo import ProductRepo
from marketplace.repos.user_repo import UserRepo
from marketplace.utils.pagination import page_window
from marketplace.utils.security import hash_password, verify_password
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)


class UserService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)
        self.products = ProductRepo(db)
        self.orders = OrderRepo(db)

    def get_user(self, user_id: int) -> UserModel:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFound("User not found")
        return user

    def update_profile(self, user_id: int, payload: ProfileUpdateIn) -> UserModel:
        user = self.get_user(user_id)
        changes = payload.model_dump(exclude_none=True)

        if "email" in changes:
            email = changes["email"].lower()
            existing = self.repo.get_by_email(email)
            if existing and existing.id != user.id:
                raise Conflict("Email already in use")
            changes["email"] = email

        for field, value in changes.items():
            setattr(user, field, value)

        self.repo.commit()
        return user

    def change_password(self, user_id: int, current_password: str, new_password: str) -> None:
        if not current_password or not new_password:
            raise InvalidRequest("Current password and new password are required")

        user = self.get_user(user_id)
        if not verify_password(current_password, user.password):
            raise InvalidRequest("Current password is incorrect")

        user.password = hash_password(new_password)
        self.repo.commit()
        logger.info(f"Password changed for user {user_id}")

    # =====================================================
    # ADMIN
    # =====================================================
    def admin_list(self, role: str | None, search: str | None, page: int, limit: int) -> Dict[str, Any]:
        if role and role not in Role.__members__:
            raise InvalidRequest("Invalid role")

        page, limit, offset = page_window(page, limit)
        users, total = self.repo.search(role=role, search=search, offset=offset, limit=limit)

        ids = [u.id for u in users]
        product_counts = self.products.count_by_seller(ids)
        order_counts = self.orders.count_by_buyer(ids)

        return {
            "users": [
                {
                    "id": u.id,
                    "name": u.name,
                    "email": u.email,
                    "role": u.role,
                    "image_url": u.image_url,
                    "created_at": u.created_at,
                    "product_count": product_counts.get(u.id, 0),
                    "order_count": order_counts.get(u.id, 0),
                }
                for u in users
            ],
            "total": total,
            "page": page,
        }

    def set_role(self, user_id: int, role: str) -> UserModel:
        if role not in Role.__members__:
            raise InvalidRequest("Invalid role")
        user = self.get_user(user_id)
        user.role = role
        self.repo.commit()
        logger.info(f"User {user_id} role set to {role}")
        return user
