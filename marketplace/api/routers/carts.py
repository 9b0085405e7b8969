# marketplace/api/routers/carts.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from marketplace.api.deps import get_current_user
from marketplace.data.database import get_db
from marketplace.data.models.user import UserModel
from marketplace.domain.schemas import ApiResponse, CartItemIn, ProductOut
from marketplace.services.cart_service import CartService

router = APIRouter(prefix="/user/cart", tags=["cart"])


def get_service(db: Session):
    return CartService(db=db)


@router.get("", response_model=ApiResponse[List[ProductOut]])
def get_cart(user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"data": get_service(db).get_cart(user.id)}


@router.post("", response_model=ApiResponse[None])
def add_item(
    payload: CartItemIn,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    get_service(db).add_product(user.id, payload.product_id)
    return {"message": "Product added to cart"}


@router.delete("/{product_id}", response_model=ApiResponse[None])
def remove_item(
    product_id: int,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    get_service(db).remove_product(user.id, product_id)
    return {"message": "Product removed from cart"}
