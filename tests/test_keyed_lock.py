"""
Tests for per-key locks.
"""

import asyncio

import pytest

from utils.keyed_lock import KeyedLock


@pytest.mark.asyncio
async def test_same_key_is_serialized():
    locks = KeyedLock()
    order = []

    async def worker(name: str, delay: float):
        async with locks.hold(1):
            order.append(f"{name}_start")
            await asyncio.sleep(delay)
            order.append(f"{name}_end")

    await asyncio.gather(worker("a", 0.05), worker("b", 0.01))

    assert order == ["a_start", "a_end", "b_start", "b_end"]


@pytest.mark.asyncio
async def test_different_keys_run_concurrently():
    locks = KeyedLock()
    order = []

    async def worker(key: int, delay: float):
        async with locks.hold(key):
            order.append(f"{key}_start")
            await asyncio.sleep(delay)
            order.append(f"{key}_end")

    await asyncio.gather(worker(1, 0.05), worker(2, 0.01))

    assert order.index("2_start") < order.index("1_end")


@pytest.mark.asyncio
async def test_check_then_act_under_lock_acts_once():
    locks = KeyedLock()
    seen: set[str] = set()
    acted = []

    async def handle(event: int):
        async with locks.hold("msg"):
            if "msg" in seen:
                return
            await asyncio.sleep(0.01)  # network call between check and act
            seen.add("msg")
            acted.append(event)

    await asyncio.gather(*(handle(i) for i in range(5)))

    assert len(acted) == 1


@pytest.mark.asyncio
async def test_locks_are_released_and_dropped():
    locks = KeyedLock()

    async with locks.hold(1):
        assert locks.is_locked(1)
        assert len(locks) == 1

    assert locks.is_locked(1) is False
    assert len(locks) == 0


@pytest.mark.asyncio
async def test_lock_released_on_error():
    locks = KeyedLock()

    with pytest.raises(RuntimeError):
        async with locks.hold(1):
            raise RuntimeError("boom")

    assert len(locks) == 0
    async with locks.hold(1):
        pass
