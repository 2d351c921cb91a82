"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Cooperative cancellation token threaded through inference and tool calls.
"""

from __future__ import annotations

import asyncio


class CancellationToken:
    """
    One-shot cancellation flag with awaitable notification.

    Child tokens are cancelled together with their parent, never the other
    way round, so a run can cancel its own operations without touching the
    caller's token.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._reason: str | None = None
        self._children: list[CancellationToken] = []

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> str | None:
        return self._reason

    def cancel(self, reason: str = "cancelled") -> None:
        if self._event.is_set():
            return
        self._reason = reason
        self._event.set()
        for child in self._children:
            child.cancel(reason)

    def child(self) -> "CancellationToken":
        token = CancellationToken()
        if self.cancelled:
            token.cancel(self._reason or "cancelled")
        else:
            self._children.append(token)
        return token

    async def wait(self) -> None:
        await self._event.wait()

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise asyncio.CancelledError(self._reason)

    def __repr__(self) -> str:
        state = f"cancelled:{self._reason}" if self.cancelled else "active"
        return f"CancellationToken({state})"
