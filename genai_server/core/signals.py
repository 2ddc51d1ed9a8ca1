"""
Cancellation primitives for outgoing requests.

An AbortSignal transitions once from pending to aborted. It can be observed
by polling (`aborted` / `reason`), by callback (`add_listener`) or by awaiting
`wait()`. An AbortController owns a signal and decides when it fires: on an
explicit `abort()`, after a delay, or when another signal it follows fires.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, List, Optional

logger = logging.getLogger("GenAIServer.Core.Signals")

DEFAULT_ABORT_REASON = "This operation was aborted"

AbortListener = Callable[[Any], None]


class AbortError(Exception):
    """Raised by a transport when the request signal fires before the response arrives."""

    def __init__(self, reason: Any = None):
        self.reason = DEFAULT_ABORT_REASON if reason is None else reason
        super().__init__(str(self.reason))


class AbortSignal:
    def __init__(self) -> None:
        self._aborted = False
        self._reason: Any = None
        self._event = asyncio.Event()
        self._listeners: List[AbortListener] = []
        self._cleanups: List[Callable[[], None]] = []

    @property
    def aborted(self) -> bool:
        return self._aborted

    @property
    def reason(self) -> Any:
        return self._reason

    def add_listener(self, listener: AbortListener) -> None:
        """Register a callback invoked with the abort reason. Not invoked if already aborted."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: AbortListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def throw_if_aborted(self) -> None:
        if self._aborted:
            raise AbortError(self._reason)

    async def wait(self) -> Any:
        """Wait until the signal fires and return the abort reason."""
        await self._event.wait()
        return self._reason

    def close(self) -> None:
        """Release pending timers and listeners on followed signals."""
        cleanups, self._cleanups = self._cleanups, []
        for cleanup in cleanups:
            cleanup()

    def _add_cleanup(self, cleanup: Callable[[], None]) -> None:
        self._cleanups.append(cleanup)

    def _fire(self, reason: Any) -> None:
        if self._aborted:
            return
        self._aborted = True
        self._reason = reason
        self._event.set()

        listeners, self._listeners = self._listeners, []
        for listener in listeners:
            try:
                listener(reason)
            except Exception as e:
                logger.error(f"Abort listener {listener!r} failed: {e}", exc_info=True)

        self.close()


class AbortController:
    def __init__(self) -> None:
        self.signal = AbortSignal()
        self._timer: Optional[asyncio.TimerHandle] = None

    def abort(self, reason: Any = None) -> None:
        self.signal._fire(DEFAULT_ABORT_REASON if reason is None else reason)

    def abort_after(self, delay_seconds: float, reason: Any = None) -> None:
        """Schedule abort() on the running loop. The timer is cancelled when the signal closes."""
        loop = asyncio.get_running_loop()
        self._cancel_timer()
        self._timer = loop.call_later(delay_seconds, self.abort, reason)
        self.signal._add_cleanup(self._cancel_timer)

    def follow(self, other: AbortSignal) -> None:
        """Abort this controller, with the same reason, when `other` aborts."""
        if other.aborted:
            self.abort(other.reason)
            return
        other.add_listener(self.abort)
        self.signal._add_cleanup(lambda: other.remove_listener(self.abort))

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
