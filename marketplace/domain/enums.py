# marketplace/domain/enums.py
from enum import Enum


class ProductStatus(str, Enum):
    UNDER_REVIEW = "UNDER_REVIEW"
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SOLD = "SOLD"


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class Role(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"


#dozwolone przejscia zamowien, COMPLETED i CANCELLED sa terminalne
ORDER_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.COMPLETED, OrderStatus.CANCELLED},
    OrderStatus.COMPLETED: set(),
    OrderStatus.CANCELLED: set(),
}

#statusy ktore sprzedawca moze ustawic sam (po akceptacji admina)
SELLER_SETTABLE_STATUSES = {ProductStatus.ACTIVE, ProductStatus.INACTIVE}
