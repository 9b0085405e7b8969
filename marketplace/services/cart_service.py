from typing import List
from sqlalchemy.orm import Session
from marketplace.data.models.product import ProductModel
from marketplace.domain.enums import ProductStatus
from marketplace.domain.errors import InvalidRequest, NotFound, Conflict
from marketplace.repos.product_repo import ProductRepo
from marketplace.repos.user_repo import UserRepo
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Koszyk to lista ID produktow trzymana na wierszu uzytkownika.
    commands (add, remove) modyfikuja liste
    query (get) tylko odczyt, filtruje po aktualnym stanie katalogu
    """

    def __init__(
        self,
        db: Session,
        product_repo: ProductRepo | None = None,
        user_repo: UserRepo | None = None,
    ):
        self.products = product_repo or ProductRepo(db)
        self.users = user_repo or UserRepo(db)

    def _get_user(self, user_id: int, for_update: bool = False):
        user = self.users.get_user_for_update(user_id) if for_update else self.users.get_user(user_id)
        if not user:
            raise NotFound("User not found")
        return user

    #query - odczyt
    def get_cart(self, user_id: int) -> List[ProductModel]:
        user = self._get_user(user_id)
        cart = list(user.cart or [])
        if not cart:
            return []

        #tylko aktywne produkty, nieaktualne wpisy zostaja w koszyku ale sa pomijane
        by_id = {p.id: p for p in self.products.list_active_by_ids(cart)}
        return [by_id[pid] for pid in cart if pid in by_id]

    #commands
    def add_product(self, user_id: int, product_id: int | None) -> None:
        if not product_id:
            raise InvalidRequest("Product ID is required")

        product = self.products.get_product(product_id)
        if not product or product.status != ProductStatus.ACTIVE.value:
            raise NotFound("Product not found or not available")

        user = self._get_user(user_id, for_update=True)
        cart = list(user.cart or [])

        if product_id in cart:
            self.users.rollback()
            raise Conflict("Product already in cart")

        self.users.set_cart(user, cart + [product_id])
        self.users.commit()

        logger.info(f"Produkt {product_id} dodany do koszyka uzytkownika {user_id}")

    def remove_product(self, user_id: int, product_id: int) -> None:
        user = self._get_user(user_id, for_update=True)
        cart = list(user.cart or [])

        if product_id not in cart:
            #idempotentne - brak wpisu to nie blad
            self.users.rollback()
            return

        self.users.set_cart(user, [pid for pid in cart if pid != product_id])
        self.users.commit()

        logger.info(f"Produkt {product_id} usuniety z koszyka uzytkownika {user_id}")
