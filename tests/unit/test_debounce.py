"""Tests for the asyncio Debouncer."""

import asyncio

import pytest

from briefsnap.shared.debounce import Debouncer


async def test_only_last_call_runs() -> None:
    seen = []

    async def func(value):
        seen.append(value)
        return value

    debouncer = Debouncer(0.05, func)
    debouncer.call("p")
    debouncer.call("pa")
    debouncer.call("par")
    assert debouncer.pending
    await debouncer.wait()
    assert seen == ["par"]
    assert debouncer.last_result == "par"
    assert debouncer.calls_superseded == 2
    assert not debouncer.pending


async def test_cancel_drops_pending_call() -> None:
    seen = []

    async def func():
        seen.append(1)

    debouncer = Debouncer(0.01, func)
    debouncer.call()
    debouncer.cancel()
    assert not debouncer.pending
    await asyncio.sleep(0.05)
    assert seen == []


async def test_flush_runs_immediately() -> None:
    async def func(x):
        return x * 2

    debouncer = Debouncer(10, func)
    debouncer.call(21)
    assert await debouncer.flush() == 42
    assert not debouncer.pending
    assert await debouncer.flush() is None


async def test_errors_are_kept_not_raised() -> None:
    async def func():
        raise RuntimeError("boom")

    debouncer = Debouncer(0, func)
    debouncer.call()
    await debouncer.wait()
    assert isinstance(debouncer.last_error, RuntimeError)


def test_negative_delay_rejected() -> None:
    async def func():
        return None

    with pytest.raises(ValueError):
        Debouncer(-1, func)


async def test_wait_follows_call_made_while_waiting() -> None:
    async def func(value):
        return value

    debouncer = Debouncer(0.05, func)
    debouncer.call("a")
    waiter = asyncio.create_task(debouncer.wait())
    await asyncio.sleep(0.01)
    debouncer.call("b")
    await waiter
    assert not debouncer.pending
    assert debouncer.last_result == "b"


async def test_wait_without_scheduled_call_returns() -> None:
    async def func():
        return 1

    await Debouncer(0.01, func).wait()
