"""Cooperative cancellation token for catalog queries."""

from __future__ import annotations

from typing import Callable


class CancellationToken:
    """Marks one request as no longer relevant.

    Cancelling runs registered abort callbacks once; the owner still checks
    :attr:`cancelled` wherever a result would be applied.
    """

    __slots__ = ("_cancelled", "_callbacks", "request_id")

    def __init__(self, request_id: int = 0) -> None:
        self.request_id = request_id
        self._cancelled = False
        self._callbacks: list[Callable[[], object]] = []

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def add_callback(self, callback: Callable[[], object]) -> None:
        if self._cancelled:
            callback()
            return
        self._callbacks.append(callback)

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()

    def __repr__(self) -> str:
        return f"CancellationToken(request_id={self.request_id}, cancelled={self._cancelled})"


__all__ = ["CancellationToken"]
