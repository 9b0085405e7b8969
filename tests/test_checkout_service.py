from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine, select, func
from sqlalchemy.orm import sessionmaker

from marketplace.data.database import Base
from marketplace.data.models import OrderModel, ProductModel, UserModel
from marketplace.domain.enums import ProductStatus, OrderStatus
from marketplace.domain.errors import Conflict, InvalidRequest
from marketplace.repos.product_repo import ProductRepo
from marketplace.repos.user_repo import UserRepo
from marketplace.services.checkout_service import CheckoutService


def _order_count(db) -> int:
    return db.execute(select(func.count(OrderModel.id))).scalar_one()


def _fresh(db, model, pk):
    db.expire_all()
    return db.get(model, pk)


@pytest.mark.unit
class TestCheckoutService:
    def test_checkout_creates_pending_orders_and_marks_sold(self, db, seller, make_user, make_product):
        p1 = make_product(seller, name="Desk", price="10.00")
        p2 = make_product(seller, name="Chair", price="20.00")
        buyer = make_user(cart=[p1.id, p2.id])

        orders = CheckoutService(db).checkout(buyer.id, [p1.id, p2.id])

        assert [o.product_id for o in orders] == [p1.id, p2.id]
        assert all(o.status == OrderStatus.PENDING.value for o in orders)
        assert all(o.user_id == buyer.id for o in orders)
        assert orders[0].product_name == "Desk"
        assert orders[1].unit_price == Decimal("20.00")

        assert _fresh(db, ProductModel, p1.id).status == ProductStatus.SOLD.value
        assert _fresh(db, ProductModel, p2.id).status == ProductStatus.SOLD.value
        assert _fresh(db, UserModel, buyer.id).cart == []

    def test_checkout_prunes_only_purchased_items(self, db, seller, make_user, make_product):
        a = make_product(seller, name="A")
        b = make_product(seller, name="B")
        c = make_product(seller, name="C")
        buyer = make_user(cart=[a.id, b.id, c.id])

        CheckoutService(db).checkout(buyer.id, [a.id, b.id])

        assert _fresh(db, UserModel, buyer.id).cart == [c.id]
        assert _fresh(db, ProductModel, c.id).status == ProductStatus.ACTIVE.value

    def test_unavailable_product_rejects_whole_checkout(self, db, seller, make_user, make_product):
        ok = make_product(seller, name="Available")
        gone = make_product(seller, name="Inactive", status=ProductStatus.INACTIVE)
        buyer = make_user(cart=[ok.id, gone.id])

        with pytest.raises(Conflict) as exc:
            CheckoutService(db).checkout(buyer.id, [ok.id, gone.id])

        assert exc.value.message == "Some products are not available"
        assert _order_count(db) == 0
        assert _fresh(db, ProductModel, ok.id).status == ProductStatus.ACTIVE.value
        assert _fresh(db, UserModel, buyer.id).cart == [ok.id, gone.id]

    def test_missing_product_rejects_checkout(self, db, seller, make_user, make_product):
        ok = make_product(seller)
        buyer = make_user(cart=[ok.id])

        with pytest.raises(Conflict):
            CheckoutService(db).checkout(buyer.id, [ok.id, 9999])

        assert _order_count(db) == 0
        assert _fresh(db, ProductModel, ok.id).status == ProductStatus.ACTIVE.value

    def test_product_sold_before_checkout(self, db, seller, make_user, make_product):
        p1 = make_product(seller)
        first = make_user(cart=[p1.id])
        second = make_user(cart=[p1.id])

        CheckoutService(db).checkout(first.id, [p1.id])

        with pytest.raises(Conflict):
            CheckoutService(db).checkout(second.id, [p1.id])

        assert _order_count(db) == 1
        assert _fresh(db, UserModel, second.id).cart == [p1.id]

    @pytest.mark.parametrize("product_ids", [None, []])
    def test_empty_request_is_invalid(self, db, buyer, product_ids):
        with pytest.raises(InvalidRequest):
            CheckoutService(db).checkout(buyer.id, product_ids)

    def test_duplicate_ids_are_invalid(self, db, seller, buyer, make_product):
        p1 = make_product(seller)
        with pytest.raises(InvalidRequest):
            CheckoutService(db).checkout(buyer.id, [p1.id, p1.id])
        assert _fresh(db, ProductModel, p1.id).status == ProductStatus.ACTIVE.value

    def test_failure_mid_commit_rolls_back_everything(self, db, seller, make_user, make_product):
        p1 = make_product(seller)
        buyer = make_user(cart=[p1.id])

        users = UserRepo(db)
        users.set_cart = MagicMock(side_effect=RuntimeError("store unavailable"))

        with pytest.raises(RuntimeError):
            CheckoutService(db, user_repo=users).checkout(buyer.id, [p1.id])

        assert _order_count(db) == 0
        assert _fresh(db, ProductModel, p1.id).status == ProductStatus.ACTIVE.value

    def test_locked_products_are_rejected(self, db, seller, buyer, make_product):
        p1 = make_product(seller)
        lock_service = MagicMock()
        lock_service.acquire_many.return_value = False

        with pytest.raises(Conflict):
            CheckoutService(db, lock_service=lock_service).checkout(buyer.id, [p1.id])

        lock_service.release_many.assert_not_called()
        assert _order_count(db) == 0

    def test_locks_released_after_checkout(self, db, seller, buyer, make_product):
        p1 = make_product(seller)
        lock_service = MagicMock()
        lock_service.acquire_many.return_value = True

        CheckoutService(db, lock_service=lock_service).checkout(buyer.id, [p1.id])

        owner = lock_service.acquire_many.call_args.args[1]
        lock_service.release_many.assert_called_once_with([p1.id], owner)

    def test_locks_released_after_rejection(self, db, seller, buyer, make_product):
        p1 = make_product(seller, status=ProductStatus.SOLD)
        lock_service = MagicMock()
        lock_service.acquire_many.return_value = True

        with pytest.raises(Conflict):
            CheckoutService(db, lock_service=lock_service).checkout(buyer.id, [p1.id])

        owner = lock_service.acquire_many.call_args.args[1]
        lock_service.release_many.assert_called_once_with([p1.id], owner)

    def test_each_checkout_uses_its_own_lock_owner(self, db, seller, buyer, make_product):
        p1 = make_product(seller)
        p2 = make_product(seller)
        lock_service = MagicMock()
        lock_service.acquire_many.return_value = True
        service = CheckoutService(db, lock_service=lock_service)

        service.checkout(buyer.id, [p1.id])
        service.checkout(buyer.id, [p2.id])

        first, second = [c.args[1] for c in lock_service.acquire_many.call_args_list]
        assert first != second
        assert str(buyer.id) not in (first, second)
        assert [c.args[1] for c in lock_service.release_many.call_args_list] == [first, second]

    def test_notification_failure_does_not_fail_checkout(self, db, seller, buyer, make_product):
        p1 = make_product(seller)
        notifier = MagicMock()
        notifier.send_order_notification.side_effect = RuntimeError("broker down")

        orders = CheckoutService(db, notification_service=notifier).checkout(buyer.id, [p1.id])

        assert len(orders) == 1
        notifier.send_order_notification.assert_called_once_with(buyer.id, orders[0].id, p1.id)

    def test_order_keeps_price_snapshot(self, db, seller, buyer, make_product):
        p1 = make_product(seller, name="Bike", price="150.00")
        order = CheckoutService(db).checkout(buyer.id, [p1.id])[0]

        product = _fresh(db, ProductModel, p1.id)
        product.price = Decimal("99.00")
        product.name = "Old bike"
        db.commit()

        order = _fresh(db, OrderModel, order.id)
        assert order.product_name == "Bike"
        assert order.unit_price == Decimal("150.00")


@pytest.mark.unit
def test_concurrent_checkout_sells_product_once(tmp_path):
    """Drugi kupujacy konczy zakup miedzy walidacja a zapisem pierwszego."""
    engine = create_engine(f"sqlite:///{tmp_path / 'race.db'}")
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

    with Session() as setup:
        seller = UserModel(name="Seller", email="s@example.com", password="x", cart=[])
        setup.add(seller)
        setup.commit()
        product = ProductModel(
            seller_id=seller.id,
            name="Camera",
            description="Film camera",
            category="Electronics",
            price=Decimal("80.00"),
            status=ProductStatus.ACTIVE.value,
        )
        setup.add(product)
        setup.commit()
        first = UserModel(name="First", email="first@example.com", password="x", cart=[product.id])
        second = UserModel(name="Second", email="second@example.com", password="x", cart=[product.id])
        setup.add_all([first, second])
        setup.commit()
        product_id, first_id, second_id = product.id, first.id, second.id

    class RacingProductRepo(ProductRepo):
        def list_by_ids(self, product_ids):
            rows = super().list_by_ids(product_ids)
            with Session() as other:
                CheckoutService(other).checkout(second_id, product_ids)
            return rows

    db = Session()
    try:
        with pytest.raises(Conflict):
            CheckoutService(db, product_repo=RacingProductRepo(db)).checkout(first_id, [product_id])
    finally:
        db.close()

    with Session() as check:
        orders = check.execute(select(OrderModel).where(OrderModel.product_id == product_id)).scalars().all()
        assert [o.user_id for o in orders] == [second_id]
        assert check.get(ProductModel, product_id).status == ProductStatus.SOLD.value
        assert check.get(UserModel, first_id).cart == [product_id]
        assert check.get(UserModel, second_id).cart == []

    engine.dispose()
