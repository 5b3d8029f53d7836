"""
Per-user critical sections (in-process and Redis variants).
"""
import threading
import time
from unittest.mock import MagicMock

import pytest

from storefront.domain.errors import LockTimeout
from storefront.services.lock_service import LocalUserLock, RedisUserLock, build_lock_service


class TestLocalUserLock:
    def test_same_user_is_serialized(self):
        lock = LocalUserLock(wait_seconds=2)
        inside = []
        overlaps = []

        def work():
            with lock.hold(1):
                inside.append(1)
                if len(inside) > 1:
                    overlaps.append(True)
                time.sleep(0.01)
                inside.pop()

        threads = [threading.Thread(target=work) for _ in range(6)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert overlaps == []

    def test_timeout_when_busy(self):
        lock = LocalUserLock(wait_seconds=0.05)

        with lock.hold(1):
            errors = []

            def contender():
                try:
                    with lock.hold(1):
                        pass
                except LockTimeout as e:
                    errors.append(e)

            t = threading.Thread(target=contender)
            t.start()
            t.join()

        assert len(errors) == 1

    def test_other_users_are_not_blocked(self):
        lock = LocalUserLock(wait_seconds=0.05)

        with lock.hold(1):
            with lock.hold(2):
                pass

    def test_lock_map_does_not_grow(self):
        lock = LocalUserLock(wait_seconds=0.05)

        for user_id in range(100):
            with lock.hold(user_id):
                assert user_id in lock._locks

        assert lock._locks == {}

    def test_entry_kept_while_someone_waits(self):
        lock = LocalUserLock(wait_seconds=2)
        entered = threading.Event()

        with lock.hold(1):
            def wait_for_lock():
                with lock.hold(1):
                    entered.set()

            waiter = threading.Thread(target=wait_for_lock)
            waiter.start()
            time.sleep(0.2)
            assert lock._locks[1][1] == 2

        waiter.join()
        assert entered.is_set()
        assert lock._locks == {}

    def test_released_after_exception(self):
        lock = LocalUserLock(wait_seconds=0.05)

        with pytest.raises(RuntimeError):
            with lock.hold(1):
                raise RuntimeError("boom")

        with lock.hold(1):
            pass


class TestRedisUserLock:
    def test_acquire_and_release_with_token(self):
        client = MagicMock()
        client.set.return_value = True
        client.eval.return_value = 1
        lock = RedisUserLock(client=client, ttl_seconds=30, wait_seconds=0.1)

        with lock.hold(7):
            pass

        kwargs = client.set.call_args.kwargs
        assert kwargs["name"] == "lock:user:7"
        assert kwargs["nx"] is True
        assert kwargs["px"] == 30000

        args = client.eval.call_args.args
        assert args[1:] == (1, "lock:user:7", kwargs["value"])

    def test_times_out_when_held_elsewhere(self):
        client = MagicMock()
        client.set.return_value = None
        lock = RedisUserLock(client=client, wait_seconds=0.05)

        with pytest.raises(LockTimeout):
            with lock.hold(7):
                pass

        assert client.set.call_count >= 1
        client.eval.assert_not_called()

    def test_lost_lock_is_only_logged(self):
        client = MagicMock()
        client.set.return_value = True
        client.eval.return_value = 0
        lock = RedisUserLock(client=client, wait_seconds=0.1)

        with lock.hold(3):
            pass

        client.eval.assert_called_once()


def test_build_lock_service_defaults_to_local():
    assert isinstance(build_lock_service("local"), LocalUserLock)
