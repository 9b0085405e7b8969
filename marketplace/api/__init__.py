# marketplace/api/__init__.py
from fastapi import APIRouter

from marketplace.api.routers import auth, users, products, carts, orders, admin

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(carts.router)
api_router.include_router(products.router)
api_router.include_router(orders.router)
api_router.include_router(admin.router)
