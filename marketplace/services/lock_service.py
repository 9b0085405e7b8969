# marketplace/services/lock_service.py
from typing import Iterable, List

import redis

from marketplace.utils.retry import redis_retry
from marketplace.utils.settings import REDIS_URL
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)

#LUA porownaj i usun, atomicity
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""

#lua jest single threaded, nikt nie wcisnie sie miedzy GET a DEL
#wiec lock zwalnia tylko ten checkout, ktory go zalozyl


class LockService:
    """
    -blokada produktow na czas checkoutu (SET NX EX)
    -zwalnianie locka przez lua (compare-and-delete)
    -to tylko szybkie odrzucenie rownoleglego zakupu,
     gwarancje daje warunkowy update w bazie
    """

    def __init__(self, url: str | None = None):
        self.redis = redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @staticmethod
    def _key(product_id: int) -> str:
        return f"product:{product_id}:checkout-lock"

    @redis_retry()
    def acquire_product_lock(self, product_id: int, owner: str, ttl: int) -> bool:
        key = self._key(product_id)
        logger.info(f"Acquire lock {key} for checkout {owner}")
        #SET product:1:checkout-lock "<token>" NX EX 30
        return bool(
            self.redis.set(
                name=key,
                value=owner,
                nx=True,
                ex=ttl, #wygasa sam, nawet jak proces padnie
            )
        )

    @redis_retry()
    def release_product_lock(self, product_id: int, owner: str) -> bool:
        key = self._key(product_id)
        logger.info(f"Release lock {key} for checkout {owner}")
        res = self.redis.eval(_RELEASE_LUA, 1, key, owner)
        return bool(res)

    def acquire_many(self, product_ids: Iterable[int], owner: str, ttl: int) -> bool:
        """Wszystko albo nic - przy porazce lub bledzie redisa zwalnia juz zalozone locki."""
        acquired: List[int] = []
        try:
            for product_id in product_ids:
                if not self.acquire_product_lock(product_id, owner, ttl):
                    self.release_many(acquired, owner)
                    return False
                acquired.append(product_id)
        except redis.RedisError:
            self.release_many(acquired, owner)
            raise
        return True

    def release_many(self, product_ids: Iterable[int], owner: str) -> None:
        for product_id in product_ids:
            try:
                self.release_product_lock(product_id, owner)
            except redis.RedisError as e:
                # lock i tak wygasnie po ttl
                logger.warning(f"Failed to release lock for product {product_id}: {e}")
