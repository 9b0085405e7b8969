# marketplace/data/seed.py
from marketplace.data.database import SessionLocal
from marketplace.data.models.user import UserModel
from marketplace.domain.enums import Role
from marketplace.repos.user_repo import UserRepo
from marketplace.utils.security import hash_password
from marketplace.utils.settings import ADMIN_NAME, ADMIN_EMAIL, ADMIN_PASSWORD
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)


def seed(db=None) -> UserModel | None:
    """Tworzy konto admina z konfiguracji (ADMIN_EMAIL / ADMIN_PASSWORD)."""
    if not ADMIN_PASSWORD:
        logger.warning("ADMIN_PASSWORD not set, skipping admin seed")
        return None

    own_session = db is None
    db = db or SessionLocal()
    try:
        repo = UserRepo(db)
        # not forcing: only seed if missing
        existing = repo.get_by_email(ADMIN_EMAIL)
        if existing:
            return existing
        admin = UserModel(
            name=ADMIN_NAME,
            email=ADMIN_EMAIL.lower(),
            password=hash_password(ADMIN_PASSWORD),
            role=Role.ADMIN.value,
            cart=[],
        )
        created = repo.create_user(admin)
        logger.info(f"Admin account {created.email} created")
        return created
    finally:
        if own_session:
            db.close()


if __name__ == "__main__":
    from marketplace.main import init_db

    init_db()
    seed()
