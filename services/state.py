"""
Status-bar message channel.

Anything may ``publish`` a status line; exactly one consumer (``run``) applies
the updates in the order they were published. Non-empty messages clear
themselves after ``clear_after`` seconds unless a newer message replaces them
first.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Callable, Protocol

import services.logger as log

l = log.get_logger()

_DEFAULT = object()


class StateChannel(Protocol):
    def publish(self, text: str, clear_after: float | None = ...) -> None: ...


@dataclass
class StatusUpdate:
    text: str
    clear_after: float | None = None


class StatusChannel:

    def __init__(
        self,
        clear_after: float = 30.0,
        on_change: Callable[[str], None] | None = None,
    ):
        self.clear_after = clear_after
        self.current = ""
        self._on_change = on_change
        self._queue: asyncio.Queue[StatusUpdate] = asyncio.Queue()
        self._clear_handle: asyncio.TimerHandle | None = None

    def publish(self, text: str, clear_after=_DEFAULT) -> None:
        """Queue *text* for the status bar. ``""`` clears it.

        *clear_after* defaults to the channel's setting for non-empty text;
        pass ``None`` to keep a message until it is replaced.
        """
        if clear_after is _DEFAULT:
            clear_after = self.clear_after if text else None
        self._queue.put_nowait(StatusUpdate(text, clear_after))

    async def run(self) -> None:
        """Consume updates forever; cancel the task to stop."""
        try:
            while True:
                update = await self._queue.get()
                try:
                    self._apply(update)
                finally:
                    self._queue.task_done()
        finally:
            self._cancel_clear()

    async def flush(self) -> None:
        """Wait until every update published so far has been applied."""
        await self._queue.join()

    def _apply(self, update: StatusUpdate) -> None:
        self._cancel_clear()
        self._set(update.text)
        if update.text and update.clear_after is not None:
            loop = asyncio.get_running_loop()
            self._clear_handle = loop.call_later(update.clear_after, self._expire)

    def _expire(self) -> None:
        self._clear_handle = None
        self._set("")

    def _cancel_clear(self) -> None:
        if self._clear_handle is not None:
            self._clear_handle.cancel()
            self._clear_handle = None

    def _set(self, text: str) -> None:
        self.current = text
        l.debug(f"status: {text!r}")
        if self._on_change is not None:
            self._on_change(text)
