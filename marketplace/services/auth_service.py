# marketplace/services/auth_service.py
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from marketplace.data.models.user import UserModel
from marketplace.domain.enums import Role
from marketplace.domain.errors import InvalidRequest, Unauthenticated, Conflict
from marketplace.domain.schemas import SignupIn
from marketplace.repos.user_repo import UserRepo
from marketplace.utils.security import hash_password, verify_password, create_token
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)


class AuthService:
    """Rejestracja i logowanie, zwraca token JWT z id i rola uzytkownika."""

    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    @staticmethod
    def _token_payload(user: UserModel) -> dict:
        return {"token": create_token(user.id, user.role), "user": {"role": user.role}}

    def signup(self, payload: SignupIn) -> dict:
        email = payload.email.lower()
        if self.repo.get_by_email(email):
            raise Conflict("Email already registered")

        user = UserModel(
            name=payload.name,
            email=email,
            password=hash_password(payload.password),
            role=Role.USER.value,
            cart=[],
        )
        try:
            created = self.repo.create_user(user)
        except IntegrityError:
            # rownolegla rejestracja na ten sam email
            self.repo.rollback()
            raise Conflict("Email already registered")

        logger.info(f"User {created.id} registered")
        return self._token_payload(created)

    def login(self, email: str, password: str) -> dict:
        if not email or not password:
            raise InvalidRequest("Email and password are required")

        user = self.repo.get_by_email(email)
        if not user or not verify_password(password, user.password):
            raise Unauthenticated("Invalid email or password")

        return self._token_payload(user)
