import pytest

from marketplace.data.models import ProductModel, UserModel
from marketplace.domain.enums import ProductStatus
from marketplace.domain.errors import Conflict, InvalidRequest, NotFound
from marketplace.services.cart_service import CartService


def _stored_cart(db, user_id):
    db.expire_all()
    return db.get(UserModel, user_id).cart


@pytest.mark.unit
class TestCartService:
    def test_add_appends_in_order(self, db, seller, buyer, make_product):
        first = make_product(seller, name="First")
        second = make_product(seller, name="Second")
        svc = CartService(db)

        svc.add_product(buyer.id, second.id)
        svc.add_product(buyer.id, first.id)

        assert _stored_cart(db, buyer.id) == [second.id, first.id]
        assert [p.id for p in svc.get_cart(buyer.id)] == [second.id, first.id]

    def test_add_requires_product_id(self, db, buyer):
        with pytest.raises(InvalidRequest):
            CartService(db).add_product(buyer.id, None)

    @pytest.mark.parametrize(
        "status",
        [ProductStatus.UNDER_REVIEW, ProductStatus.INACTIVE, ProductStatus.SOLD],
    )
    def test_add_rejects_inactive_product(self, db, seller, buyer, make_product, status):
        product = make_product(seller, status=status)
        with pytest.raises(NotFound):
            CartService(db).add_product(buyer.id, product.id)
        assert _stored_cart(db, buyer.id) == []

    def test_add_rejects_unknown_product(self, db, buyer):
        with pytest.raises(NotFound):
            CartService(db).add_product(buyer.id, 12345)

    def test_add_twice_is_conflict(self, db, seller, buyer, make_product):
        product = make_product(seller)
        svc = CartService(db)
        svc.add_product(buyer.id, product.id)

        with pytest.raises(Conflict):
            svc.add_product(buyer.id, product.id)

        assert _stored_cart(db, buyer.id) == [product.id]

    def test_remove_absent_entry_is_noop(self, db, seller, make_user, make_product):
        product = make_product(seller)
        user = make_user(cart=[product.id])

        CartService(db).remove_product(user.id, 4242)

        assert _stored_cart(db, user.id) == [product.id]

    def test_remove_entry(self, db, seller, make_user, make_product):
        a = make_product(seller, name="A")
        b = make_product(seller, name="B")
        user = make_user(cart=[a.id, b.id])

        CartService(db).remove_product(user.id, a.id)

        assert _stored_cart(db, user.id) == [b.id]

    def test_read_excludes_stale_entries_without_removing_them(self, db, seller, make_user, make_product):
        keep = make_product(seller, name="Keep")
        deactivated = make_product(seller, name="Deactivated")
        user = make_user(cart=[keep.id, deactivated.id, 777])

        product = db.get(ProductModel, deactivated.id)
        product.status = ProductStatus.INACTIVE.value
        db.commit()

        items = CartService(db).get_cart(user.id)

        assert [p.id for p in items] == [keep.id]
        assert _stored_cart(db, user.id) == [keep.id, deactivated.id, 777]

    def test_read_empty_cart(self, db, buyer):
        assert CartService(db).get_cart(buyer.id) == []
