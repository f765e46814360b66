"""Coalesce keystroke bursts into one committed update per field."""

from __future__ import annotations

import asyncio
from typing import Callable

from finder.logging import logger

CommitHandler = Callable[[str, str], None]
ActivityHandler = Callable[[str, str], None]


class DebouncedInputController:
    """Trailing-edge debounce for the free-text search fields.

    The visible control value changes on every keystroke; ``on_commit`` runs
    once per field after ``delay`` seconds without further input. Timers are
    ``loop.call_later`` handles, so this must be driven from a running loop.
    """

    FIELDS = ("term", "location")

    def __init__(
        self,
        on_commit: CommitHandler,
        *,
        delay: float = 0.3,
        on_activity: ActivityHandler | None = None,
    ) -> None:
        self._on_commit = on_commit
        self._on_activity = on_activity
        self.delay = delay
        self._values: dict[str, str] = {field: "" for field in self.FIELDS}
        self._timers: dict[str, asyncio.TimerHandle] = {}
        self._closed = False

    def value(self, field: str) -> str:
        return self._values[self._check(field)]

    @property
    def values(self) -> dict[str, str]:
        return dict(self._values)

    def pending(self, field: str | None = None) -> bool:
        if field is None:
            return bool(self._timers)
        return field in self._timers

    def on_change(self, field: str, value: str) -> None:
        self._check(field)
        if self._closed:
            return
        self._values[field] = value
        if value.strip() and self._on_activity is not None:
            self._on_activity(field, value)
        self._cancel(field)
        loop = asyncio.get_running_loop()
        self._timers[field] = loop.call_later(self.delay, self._commit, field)

    def set_value(self, field: str, value: str) -> None:
        """Overwrite the control value without committing it."""

        self._cancel(self._check(field))
        self._values[field] = value

    def flush(self, field: str | None = None) -> None:
        """Commit pending input right away (e.g. the user pressed Enter)."""

        fields = [self._check(field)] if field is not None else list(self._timers)
        for name in fields:
            if name in self._timers:
                self._cancel(name)
                self._commit(name)

    def close(self) -> None:
        self._closed = True
        for field in list(self._timers):
            self._cancel(field)

    def _commit(self, field: str) -> None:
        self._timers.pop(field, None)
        if self._closed:
            return
        value = self._values[field]
        logger.debug("input_committed", field=field, length=len(value))
        self._on_commit(field, value)

    def _cancel(self, field: str) -> None:
        handle = self._timers.pop(field, None)
        if handle is not None:
            handle.cancel()

    def _check(self, field: str) -> str:
        if field not in self._values:
            raise KeyError(f"Unknown input field: {field}")
        return field


__all__ = ["DebouncedInputController"]
