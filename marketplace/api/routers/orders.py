# marketplace/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from marketplace.api.deps import get_current_user
from marketplace.data.database import get_db
from marketplace.data.models.user import UserModel
from marketplace.domain.schemas import ApiResponse, CheckoutIn, OrderOut
from marketplace.services.checkout_service import CheckoutService
from marketplace.services.lock_service import LockService
from marketplace.services.order_service import OrderService
from marketplace.utils.settings import CHECKOUT_LOCK_ENABLED

router = APIRouter(prefix="/user", tags=["orders"])


def get_checkout_service(db: Session):
    return CheckoutService(
        db=db,
        lock_service=LockService() if CHECKOUT_LOCK_ENABLED else None,
    )


@router.post("/purchase", response_model=ApiResponse[List[OrderOut]], status_code=201)
def purchase(
    payload: CheckoutIn,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Tworzy zamowienia (jedno na produkt) i oznacza produkty jako SOLD.
    Wszystko albo nic - niedostepny produkt odrzuca caly zakup.
    """
    orders = get_checkout_service(db).checkout(user.id, payload.product_ids)
    return {"message": "Purchase created successfully", "data": orders}


@router.get("/orders", response_model=ApiResponse[List[OrderOut]])
def order_history(user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Historia zamowien kupujacego, najnowsze pierwsze.
    """
    return {"data": OrderService(db).list_for_buyer(user.id)}
