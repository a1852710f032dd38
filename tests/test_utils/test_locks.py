"""Tests for keyed locks."""

import asyncio

import pytest

from swarmdeploy.utils.locks import KeyedLock


@pytest.mark.asyncio
class TestKeyedLock:
    """Test KeyedLock."""

    async def test_same_key_is_serialized(self):
        lock = KeyedLock()
        events = []

        async def worker(tag):
            async with lock.hold("api"):
                events.append(f"{tag}-start")
                await asyncio.sleep(0.01)
                events.append(f"{tag}-end")

        await asyncio.gather(worker("a"), worker("b"))

        assert events == ["a-start", "a-end", "b-start", "b-end"]

    async def test_different_keys_run_concurrently(self):
        lock = KeyedLock()
        both_held = asyncio.Event()

        async def worker(key):
            async with lock.hold(key):
                if lock.locked("api") and lock.locked("web"):
                    both_held.set()
                await asyncio.wait_for(both_held.wait(), timeout=1)

        await asyncio.gather(worker("api"), worker("web"))

        assert both_held.is_set()

    async def test_lock_released_on_error(self):
        lock = KeyedLock()

        with pytest.raises(RuntimeError):
            async with lock.hold("api"):
                raise RuntimeError("boom")

        assert not lock.locked("api")
        async with lock.hold("api"):
            assert lock.locked("api")

    async def test_unused_locks_are_dropped(self):
        lock = KeyedLock()

        async with lock.hold("api"):
            pass

        assert lock._locks == {}
        assert lock._waiters == {}
