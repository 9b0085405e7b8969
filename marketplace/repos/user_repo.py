# marketplace/repos/user_repo.py
from typing import List, Sequence

from sqlalchemy import select, func, or_
from sqlalchemy.orm import Session

from marketplace.data.models.user import UserModel


class UserRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: int) -> UserModel | None:
        return self.db.get(UserModel, user_id)

    def get_user_for_update(self, user_id: int) -> UserModel | None:
        # blokada wiersza (postgres), sqlite ignoruje FOR UPDATE
        return self.db.execute(
            select(UserModel).where(UserModel.id == user_id).with_for_update()
        ).scalar_one_or_none()

    def get_by_email(self, email: str) -> UserModel | None:
        return self.db.execute(
            select(UserModel).where(func.lower(UserModel.email) == email.lower())
        ).scalar_one_or_none()

    def list_by_ids(self, user_ids: Sequence[int]) -> List[UserModel]:
        if not user_ids:
            return []
        return list(
            self.db.execute(select(UserModel).where(UserModel.id.in_(user_ids))).scalars().all()
        )

    def search(
        self,
        role: str | None,
        search: str | None,
        offset: int,
        limit: int,
    ) -> tuple[List[UserModel], int]:
        conditions = []
        if role:
            conditions.append(UserModel.role == role)
        if search:
            conditions.append(
                or_(
                    UserModel.name.icontains(search, autoescape=True),
                    UserModel.email.icontains(search, autoescape=True),
                )
            )
        users = self.db.execute(
            select(UserModel)
            .where(*conditions)
            .order_by(UserModel.created_at.desc(), UserModel.id.desc())
            .offset(offset)
            .limit(limit)
        ).scalars().all()
        total = self.db.execute(select(func.count(UserModel.id)).where(*conditions)).scalar_one()
        return list(users), total

    def count_users(self) -> int:
        return self.db.execute(select(func.count(UserModel.id))).scalar_one()

    def set_cart(self, user: UserModel, product_ids: List[int]) -> None:
        # nowa lista - JSON kolumna nie sledzi mutacji in-place
        user.cart = list(product_ids)

    def create_user(self, user: UserModel) -> UserModel:
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
