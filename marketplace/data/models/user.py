from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, JSON

from marketplace.data.database import Base
from marketplace.domain.enums import Role


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    # zawsze lowercase, unikalnosc case-insensitive
    email = Column(String(255), nullable=False, unique=True, index=True)
    password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=Role.USER.value)

    # koszyk jako lista ID produktow (slaba referencja, bez kaskad)
    cart = Column(JSON, nullable=False, default=lambda: [])

    location = Column(String(255), nullable=True)
    image_url = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
