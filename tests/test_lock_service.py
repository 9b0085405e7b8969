from unittest.mock import MagicMock

import pytest
import redis

from marketplace.services.lock_service import LockService


@pytest.fixture
def lock_service():
    svc = LockService("redis://localhost:6379/0")
    svc.redis = MagicMock()
    return svc


@pytest.mark.unit
class TestLockService:
    def test_acquire_uses_set_nx_with_ttl(self, lock_service):
        lock_service.redis.set.return_value = True

        assert lock_service.acquire_product_lock(5, owner="7", ttl=30) is True
        lock_service.redis.set.assert_called_once_with(
            name="product:5:checkout-lock", value="7", nx=True, ex=30
        )

    def test_acquire_many_releases_partial_locks(self, lock_service):
        lock_service.redis.set.side_effect = [True, None]
        lock_service.redis.eval.return_value = 1

        assert lock_service.acquire_many([1, 2], owner="7", ttl=30) is False
        lock_service.redis.eval.assert_called_once()
        args = lock_service.redis.eval.call_args.args
        assert args[1:] == (1, "product:1:checkout-lock", "7")

    def test_acquire_many_success(self, lock_service):
        lock_service.redis.set.return_value = True

        assert lock_service.acquire_many([1, 2, 3], owner="7", ttl=30) is True
        assert lock_service.redis.set.call_count == 3
        lock_service.redis.eval.assert_not_called()

    def test_release_many_swallows_redis_errors(self, lock_service):
        lock_service.redis.eval.side_effect = redis.ConnectionError("down")

        lock_service.release_many([1], owner="7")

        # tenacity ponawia 3 razy zanim sie podda
        assert lock_service.redis.eval.call_count == 3

    def test_acquire_many_releases_partial_locks_on_redis_error(self, lock_service):
        lock_service.redis.set.side_effect = [True] + [redis.ConnectionError("down")] * 3
        lock_service.redis.eval.return_value = 1

        with pytest.raises(redis.ConnectionError):
            lock_service.acquire_many([1, 2], owner="7", ttl=30)

        lock_service.redis.eval.assert_called_once()
        args = lock_service.redis.eval.call_args.args
        assert args[1:] == (1, "product:1:checkout-lock", "7")
