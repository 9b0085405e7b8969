# marketplace/api/routers/admin.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from marketplace.api.deps import require_admin
from marketplace.data.database import get_db
from marketplace.domain.schemas import (
    ApiResponse,
    AdminOrderPageOut,
    AdminProductOut,
    AdminProductPageOut,
    AdminUserPageOut,
    MetricsOut,
    OrderOut,
    ProductUpdateIn,
    ProfileOut,
    RoleUpdateIn,
    StatusIn,
)
from marketplace.services.metrics_service import MetricsService
from marketplace.services.order_service import OrderService
from marketplace.services.product_service import ProductService
from marketplace.services.user_service import UserService

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


# moderacja produktow
@router.get("/products", response_model=ApiResponse[AdminProductPageOut])
def list_products(
    status: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
    db: Session = Depends(get_db),
):
    return {"data": ProductService(db).admin_list(status, search, page, limit)}


@router.put("/products/{product_id}/status", response_model=ApiResponse[AdminProductOut])
def update_product_status(product_id: int, payload: StatusIn, db: Session = Depends(get_db)):
    product = ProductService(db).admin_set_status(product_id, payload.status)
    return {"message": "Product status updated", "data": product}


@router.put("/products/{product_id}", response_model=ApiResponse[AdminProductOut])
def update_product_fields(product_id: int, payload: ProductUpdateIn, db: Session = Depends(get_db)):
    product = ProductService(db).admin_update_fields(product_id, payload)
    return {"message": "Product updated", "data": product}


# uzytkownicy
@router.get("/users", response_model=ApiResponse[AdminUserPageOut])
def list_users(
    search: Optional[str] = Query(None),
    role: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
    db: Session = Depends(get_db),
):
    return {"data": UserService(db).admin_list(role, search, page, limit)}


@router.put("/users/{user_id}/role", response_model=ApiResponse[ProfileOut])
def update_user_role(user_id: int, payload: RoleUpdateIn, db: Session = Depends(get_db)):
    user = UserService(db).set_role(user_id, payload.role)
    return {"message": "User role updated", "data": user}


# zamowienia
@router.get("/orders", response_model=ApiResponse[AdminOrderPageOut])
def list_orders(
    status: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
    db: Session = Depends(get_db),
):
    return {"data": OrderService(db).list_for_admin(status, search, page, limit)}


@router.put("/orders/{order_id}/status", response_model=ApiResponse[OrderOut])
def update_order_status(order_id: int, payload: StatusIn, db: Session = Depends(get_db)):
    order = OrderService(db).set_status(order_id, payload.status)
    return {"message": "Order status updated", "data": order}


@router.get("/metrics", response_model=ApiResponse[MetricsOut])
def metrics(db: Session = Depends(get_db)):
    return {"data": MetricsService(db).get_metrics()}
