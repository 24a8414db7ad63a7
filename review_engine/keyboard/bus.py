"""
Keyboard Bus

The process-wide key input stream. Components attach a listener while
they are active and detach it on teardown; the bus delivers each event to
every attached listener in registration order.

Delivery is serial and non-reentrant: an event dispatched from inside a
listener is queued and delivered after the current event has reached
every listener, matching the host event loop's one-event-at-a-time
delivery.
"""

from __future__ import annotations

from collections import deque
from typing import Callable, Deque, List, Optional

from loguru import logger

from .events import KeyEvent

KeyListener = Callable[[KeyEvent], None]


class KeyboardBus:
    """Ordered set of key listeners with serial event delivery."""

    def __init__(self):
        self._listeners: List[KeyListener] = []
        self._pending: Deque[KeyEvent] = deque()
        self._dispatching = False

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def add_listener(self, listener: KeyListener) -> None:
        """Attach a listener. Attaching the same listener twice is a no-op."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: KeyListener) -> None:
        """Detach a listener. Unknown listeners are ignored."""
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def dispatch(self, event: KeyEvent) -> KeyEvent:
        """
        Deliver an event to every attached listener.

        Args:
            event: Key press to deliver

        Returns:
            The same event, so callers can inspect `default_prevented`.
            Events queued during another dispatch are returned before
            they have been delivered.
        """
        self._pending.append(event)

        if self._dispatching:
            return event

        self._dispatching = True
        try:
            while self._pending:
                self._deliver(self._pending.popleft())
        finally:
            self._dispatching = False
            self._pending.clear()

        return event

    def _deliver(self, event: KeyEvent) -> None:
        # Snapshot so listeners may detach themselves mid-delivery
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(f"Key listener failed on {event.key!r}")


_default_bus: Optional[KeyboardBus] = None


def get_default_bus() -> KeyboardBus:
    """Get the process-wide keyboard bus."""
    global _default_bus
    if _default_bus is None:
        _default_bus = KeyboardBus()
    return _default_bus
