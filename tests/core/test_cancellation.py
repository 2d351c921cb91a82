from __future__ import annotations

import asyncio

import pytest

from toolgraph.core import CancellationToken


def test_cancel_sets_reason_once():
    async def scenario():
        token = CancellationToken()
        token.cancel("first")
        token.cancel("second")
        return token

    token = asyncio.run(scenario())

    assert token.cancelled
    assert token.reason == "first"
    assert "cancelled:first" in repr(token)


def test_parent_cancels_children_but_not_the_reverse():
    async def scenario():
        parent = CancellationToken()
        child = parent.child()
        sibling = parent.child()
        sibling.cancel("local")
        assert not parent.cancelled
        parent.cancel("shutdown")
        return child, sibling

    child, sibling = asyncio.run(scenario())

    assert child.cancelled and child.reason == "shutdown"
    assert sibling.reason == "local"


def test_child_of_cancelled_token_starts_cancelled():
    async def scenario():
        parent = CancellationToken()
        parent.cancel("gone")
        return parent.child()

    assert asyncio.run(scenario()).reason == "gone"


def test_wait_wakes_when_cancelled():
    async def scenario():
        token = CancellationToken()
        asyncio.get_running_loop().call_later(0.01, token.cancel, "later")
        await asyncio.wait_for(token.wait(), timeout=1.0)
        return token.reason

    assert asyncio.run(scenario()) == "later"


def test_raise_if_cancelled():
    async def scenario():
        token = CancellationToken()
        token.raise_if_cancelled()
        token.cancel()
        with pytest.raises(asyncio.CancelledError):
            token.raise_if_cancelled()

    asyncio.run(scenario())
