# marketplace/api/deps.py
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from marketplace.data.database import get_db
from marketplace.data.models.user import UserModel
from marketplace.domain.enums import Role
from marketplace.domain.errors import Unauthenticated, Forbidden
from marketplace.repos.user_repo import UserRepo
from marketplace.utils.security import decode_token


def get_current_user(
    authorization: Optional[str] = Header(None),
    db: Session = Depends(get_db),
) -> UserModel:
    if not authorization:
        raise Unauthenticated("No token provided")

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise Unauthenticated("No token provided")

    payload = decode_token(token)
    if not payload or not str(payload.get("sub", "")).isdigit():
        raise Unauthenticated("Unauthorized")

    user = UserRepo(db).get_user(int(payload["sub"]))
    if not user:
        raise Unauthenticated("Unauthorized")
    return user


def require_admin(user: UserModel = Depends(get_current_user)) -> UserModel:
    # rola z bazy, nie z tokena - odebranie roli dziala od razu
    if user.role != Role.ADMIN.value:
        raise Forbidden("Forbidden")
    return user
