import threading

import pytest

from src.lazyhr.lazyhr.common.locks import KeyedLocks
from src.lazyhr.lazyhr.core.exceptions import OperationTimeoutError


def test_lock_entries_are_dropped_when_idle():
    locks = KeyedLocks(timeout=1.0)
    with locks.hold(("LEAVE_REQUEST", 1)):
        assert len(locks) == 1
    assert len(locks) == 0


def test_holding_one_key_does_not_block_another():
    locks = KeyedLocks(timeout=0.1)
    with locks.hold("a"):
        with locks.hold("b"):
            assert len(locks) == 2


def test_waiting_past_the_deadline_raises_timeout():
    locks = KeyedLocks(timeout=0.05)
    held = threading.Event()
    release = threading.Event()

    def owner():
        with locks.hold("busy"):
            held.set()
            release.wait(2)

    t = threading.Thread(target=owner)
    t.start()
    held.wait(2)
    try:
        with pytest.raises(OperationTimeoutError) as exc:
            with locks.hold("busy"):
                pass
        assert exc.value.to_dict()["code"] == "TIMEOUT"
    finally:
        release.set()
        t.join()
    assert len(locks) == 0
