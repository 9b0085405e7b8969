# marketplace/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, EmailStr
from typing import Generic, List, Optional, TypeVar
from decimal import Decimal
from datetime import datetime

from marketplace.domain.enums import ProductStatus, OrderStatus, Role

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Koperta odpowiedzi: {success, message, data}."""

    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None


# =====================================================
# AUTH / USER
# =====================================================
class SignupIn(BaseModel):
    """Schema dla rejestracji."""

    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=1)


class LoginIn(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AuthUserOut(BaseModel):
    role: Role


class TokenOut(BaseModel):
    token: str
    user: AuthUserOut


class SessionOut(BaseModel):
    user_id: int = Field(..., serialization_alias="userId")
    role: Role


class ProfileOut(BaseModel):
    """Schema dla profilu uzytkownika (response)."""

    id: int
    name: str
    email: str
    location: Optional[str] = None
    image_url: Optional[str] = None
    role: Role
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProfileUpdateIn(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    location: Optional[str] = Field(None, max_length=255)
    image_url: Optional[str] = Field(None, max_length=500)


class PasswordChangeIn(BaseModel):
    current_password: str = Field(..., alias="currentPassword", min_length=1)
    new_password: str = Field(..., alias="newPassword", min_length=1)

    model_config = ConfigDict(populate_by_name=True)


class UserSummaryOut(BaseModel):
    id: int
    name: str
    email: Optional[str] = None
    location: Optional[str] = None
    image_url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class SellerOut(BaseModel):
    id: int
    name: str
    location: Optional[str] = None
    image_url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class AdminUserOut(BaseModel):
    id: int
    name: str
    email: str
    role: Role
    image_url: Optional[str] = None
    created_at: datetime
    product_count: int = Field(0, serialization_alias="productCount")
    order_count: int = Field(0, serialization_alias="orderCount")

    model_config = ConfigDict(from_attributes=True)


class RoleUpdateIn(BaseModel):
    role: str


# =====================================================
# PRODUCTS
# =====================================================
class ProductCreateIn(BaseModel):
    """Schema dla wystawienia produktu przez sprzedawce."""

    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1, max_length=100)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    image_url: Optional[str] = Field(None, max_length=500)


class ProductUpdateIn(BaseModel):
    """Edycja produktu - pola opcjonalne, None = bez zmian."""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    image_url: Optional[str] = Field(None, max_length=500)
    status: Optional[ProductStatus] = None


class StatusIn(BaseModel):
    status: str


class ProductOut(BaseModel):
    """Schema dla produktu (response)."""

    id: int
    seller_id: int
    name: str
    description: str
    category: str
    price: Decimal
    status: ProductStatus
    image_url: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProductWithSellerOut(ProductOut):
    seller: Optional[SellerOut] = None


class AdminProductOut(ProductOut):
    seller: Optional[UserSummaryOut] = None


class PaginationOut(BaseModel):
    current_page: int = Field(..., serialization_alias="currentPage")
    total_pages: int = Field(..., serialization_alias="totalPages")
    total_count: int = Field(..., serialization_alias="totalCount")
    has_next: bool = Field(..., serialization_alias="hasNext")
    has_prev: bool = Field(..., serialization_alias="hasPrev")


class ProductPageOut(BaseModel):
    products: List[ProductWithSellerOut]
    pagination: PaginationOut


class AdminProductPageOut(BaseModel):
    products: List[AdminProductOut]
    total: int
    page: int


# =====================================================
# CART / CHECKOUT
# =====================================================
class CartItemIn(BaseModel):
    """Schema dla dodawania produktu do koszyka."""

    product_id: Optional[int] = Field(None, alias="productId", gt=0)

    model_config = ConfigDict(populate_by_name=True)


class CheckoutIn(BaseModel):
    """Schema dla zakupu produktow z koszyka."""

    product_ids: Optional[List[int]] = Field(None, alias="productIds")

    model_config = ConfigDict(populate_by_name=True)


# =====================================================
# ORDERS
# =====================================================
class OrderProductOut(BaseModel):
    id: int
    name: str
    price: Decimal
    image_url: Optional[str] = None
    seller_id: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    """Schema dla zamowienia (response)."""

    id: int
    user_id: int
    product_id: int
    status: OrderStatus
    product_name: str
    unit_price: Decimal
    created_at: datetime
    product: Optional[OrderProductOut] = None

    model_config = ConfigDict(from_attributes=True)


class AdminOrderOut(OrderOut):
    user: Optional[UserSummaryOut] = None
    seller: Optional[UserSummaryOut] = None


class AdminOrderPageOut(BaseModel):
    orders: List[AdminOrderOut]
    total: int
    page: int


class AdminUserPageOut(BaseModel):
    users: List[AdminUserOut]
    total: int
    page: int


# =====================================================
# METRICS
# =====================================================
class StatusCountOut(BaseModel):
    status: str
    count: int


class CategoryCountOut(BaseModel):
    category: str
    count: int


class MetricsOut(BaseModel):
    product_totals: List[StatusCountOut] = Field(..., serialization_alias="productTotals")
    users_count: int = Field(..., serialization_alias="usersCount")
    orders_count: int = Field(..., serialization_alias="ordersCount")
    top_categories: List[CategoryCountOut] = Field(..., serialization_alias="topCategories")
