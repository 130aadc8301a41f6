# basket_service/services/lock_service.py
import uuid

import redis

from basket_service.utils.retry import redis_retry
from basket_service.utils.settings import REDIS_URL
from basket_service.utils.logging import get_logger

logger = get_logger(__name__)

#LUA porownaj i usun, atomicity
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""

#redis wykonuje skrypt lua atomowo, nie mozna wcisnac sie miedzy GET a DEL
#wiec lock zwolni tylko ten kto go zalozyl (ten sam token)


class LockService:
    """
    -lock koszyka per uzytkownik (jedna mutacja na raz)
    -zwalnianie locka po tokenie
    -TTL zeby lock po padnietym procesie sam wygasl
    """

    def __init__(self, url: str | None = None, client: redis.Redis | None = None):
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @staticmethod
    def new_token() -> str:
        return uuid.uuid4().hex

    @redis_retry()
    def acquire_basket_lock(self, user_id: int, token: str, ttl: int) -> bool:
        key = f"basket:{user_id}:lock"
        logger.info(f"Acquire lock {key}")
        #SET basket:1:lock "<token>" NX EX 10
        return bool(
            self.redis.set(
                name=key,
                value=token,
                nx=True,
                ex=ttl,
            )
        )

    @redis_retry()
    def release_basket_lock(self, user_id: int, token: str) -> bool:
        key = f"basket:{user_id}:lock"
        logger.info(f"Release lock {key}")
        res = self.redis.eval(_RELEASE_LUA, 1, key, token)
        return bool(res)
