# marketplace/api/routers/products.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from marketplace.api.deps import get_current_user
from marketplace.data.database import get_db
from marketplace.data.models.user import UserModel
from marketplace.domain.schemas import (
    ApiResponse,
    ProductCreateIn,
    ProductUpdateIn,
    ProductOut,
    ProductWithSellerOut,
    ProductPageOut,
)
from marketplace.services.product_service import ProductService

router = APIRouter(prefix="/user", tags=["products"])


@router.post("/products", response_model=ApiResponse[ProductOut], status_code=201)
def create_product(
    payload: ProductCreateIn,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    product = ProductService(db).create_product(user.id, payload)
    return {"message": "Product created successfully", "data": product}


@router.get("/my-products", response_model=ApiResponse[List[ProductOut]])
def my_products(user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"data": ProductService(db).list_my_products(user.id)}


@router.put("/products/{product_id}", response_model=ApiResponse[ProductOut])
def update_product(
    product_id: int,
    payload: ProductUpdateIn,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    product = ProductService(db).update_product(product_id, user.id, payload)
    return {"message": "Product updated successfully", "data": product}


@router.delete("/products/{product_id}", response_model=ApiResponse[None])
def delete_product(
    product_id: int,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    ProductService(db).delete_product(product_id, user.id)
    return {"message": "Product deleted successfully"}


@router.get("/products", response_model=ApiResponse[ProductPageOut])
def browse_products(
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return {"data": ProductService(db).browse(category, search, page, limit)}


@router.get("/products/{product_id}", response_model=ApiResponse[ProductWithSellerOut])
def get_product(
    product_id: int,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return {"data": ProductService(db).get_product(product_id)}
