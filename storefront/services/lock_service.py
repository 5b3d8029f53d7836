import threading
import uuid
from contextlib import contextmanager
from typing import Dict, Iterator

import redis

from storefront.domain.errors import LockTimeout
from storefront.utils.retry import redis_retry, until_acquired
from storefront.utils.settings import (
    LOCK_BACKEND,
    LOCK_TTL_SECONDS,
    LOCK_WAIT_SECONDS,
    REDIS_URL,
)
from storefront.utils.logging import get_logger

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
#wiec lock zwalnia tylko ten, kto go trzyma (token)


class UserLockService:
    """
    Sekcja krytyczna per uzytkownik:
    - operacje na koszyku i skladanie zamowienia jednego usera ida po kolei
    - rozni userzy nie blokuja sie nawzajem
    """

    @contextmanager
    def hold(self, user_id: int) -> Iterator[None]:
        raise NotImplementedError


class LocalUserLock(UserLockService):
    """Zamki w procesie, jeden threading.Lock na uzytkownika."""

    def __init__(self, wait_seconds: float = LOCK_WAIT_SECONDS):
        self.wait_seconds = wait_seconds
        self._guard = threading.Lock()
        # user_id -> [lock, liczba trzymajacych i czekajacych]
        self._locks: Dict[int, list] = {}

    def _checkout(self, user_id: int) -> threading.Lock:
        with self._guard:
            entry = self._locks.get(user_id)
            if entry is None:
                entry = self._locks[user_id] = [threading.Lock(), 0]
            entry[1] += 1
            return entry[0]

    def _checkin(self, user_id: int) -> None:
        # nikt nie trzyma ani nie czeka -> wpis usuwany, mapa nie rosnie
        with self._guard:
            entry = self._locks[user_id]
            entry[1] -= 1
            if entry[1] == 0:
                del self._locks[user_id]

    @contextmanager
    def hold(self, user_id: int) -> Iterator[None]:
        lock = self._checkout(user_id)
        try:
            if not lock.acquire(timeout=self.wait_seconds):
                logger.warning(f"Timed out waiting for cart lock of user {user_id}")
                raise LockTimeout(f"Cart of user {user_id} is busy, try again")
            try:
                yield
            finally:
                lock.release()
        finally:
            self._checkin(user_id)


class RedisUserLock(UserLockService):
    """
    Rozproszony lock dla wielu procesow API:
    SET lock:user:{id} <token> NX PX <ttl>, zwolnienie przez lua
    """

    def __init__(
        self,
        client: redis.Redis | None = None,
        url: str | None = None,
        ttl_seconds: int = LOCK_TTL_SECONDS,
        wait_seconds: float = LOCK_WAIT_SECONDS,
    ):
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )
        self.ttl_ms = int(ttl_seconds * 1000)
        self.wait_seconds = wait_seconds

    @staticmethod
    def key(user_id: int) -> str:
        return f"lock:user:{user_id}"

    @redis_retry()
    def try_acquire(self, user_id: int, token: str) -> bool:
        #SET lock:user:1 "token" NX PX 30000
        return bool(
            self.redis.set(
                name=self.key(user_id),
                value=token,
                nx=True, #tylko jesli klucz nie istnieje
                px=self.ttl_ms, #wygasa sam jesli proces padnie
            )
        )

    def acquire(self, user_id: int, token: str) -> bool:
        attempt = until_acquired(self.wait_seconds)(self.try_acquire)
        return attempt(user_id, token)

    @redis_retry()
    def release(self, user_id: int, token: str) -> bool:
        res = self.redis.eval(_RELEASE_LUA, 1, self.key(user_id), token)
        return bool(res)

    @contextmanager
    def hold(self, user_id: int) -> Iterator[None]:
        token = uuid.uuid4().hex
        logger.debug(f"Acquire lock {self.key(user_id)}")
        if not self.acquire(user_id, token):
            logger.warning(f"Timed out waiting for {self.key(user_id)}")
            raise LockTimeout(f"Cart of user {user_id} is busy, try again")
        try:
            yield
        finally:
            if not self.release(user_id, token):
                # TTL minal i ktos inny przejal lock
                logger.warning(f"Lock {self.key(user_id)} expired before release")


def build_lock_service(backend: str = LOCK_BACKEND) -> UserLockService:
    if backend == "redis":
        logger.info("Using Redis per-user cart locks")
        return RedisUserLock()
    return LocalUserLock()
