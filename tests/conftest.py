import os

# konfiguracja przed importem aplikacji - settings czytane przy imporcie
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["CHECKOUT_LOCK_ENABLED"] = "false"
os.environ["JWT_SECRET"] = "test-secret"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from marketplace.data.database import Base, get_db
from marketplace.data.models import UserModel, ProductModel
from marketplace.domain.enums import ProductStatus, Role
from marketplace.main import app
from marketplace.utils.security import hash_password, create_token


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(name=None, email=None, role=Role.USER, password="secret123", cart=None):
        counter["n"] += 1
        user = UserModel(
            name=name or f"User {counter['n']}",
            email=(email or f"user{counter['n']}@example.com").lower(),
            password=hash_password(password),
            role=role.value,
            cart=list(cart or []),
        )
        db.add(user)
        db.commit()
        return user

    return _make


@pytest.fixture
def make_product(db):
    def _make(seller, name="Vintage lamp", price="10.00", status=ProductStatus.ACTIVE, category="Furniture",
              description="Used, works fine"):
        product = ProductModel(
            seller_id=seller.id,
            name=name,
            description=description,
            category=category,
            price=Decimal(price),
            status=status.value,
        )
        db.add(product)
        db.commit()
        return product

    return _make


@pytest.fixture
def auth_headers():
    def _headers(user):
        return {"Authorization": f"Bearer {create_token(user.id, user.role)}"}

    return _headers


@pytest.fixture
def seller(make_user):
    return make_user(name="Sam Seller", email="seller@example.com")


@pytest.fixture
def buyer(make_user):
    return make_user(name="Bea Buyer", email="buyer@example.com")


@pytest.fixture
def admin(make_user):
    return make_user(name="Ada Admin", email="admin@example.com", role=Role.ADMIN)
