"""
Keyboard Component Base

Scoped acquisition of a KeyboardBus listener. A component is attached by
activate() and detached by deactivate(); the context manager and
activated() guard detach on every exit path, including exceptions.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .bus import KeyboardBus
    from .events import KeyEvent


class KeyboardComponent:
    """Base class for components that react to key presses."""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self._bus: Optional['KeyboardBus'] = None

    @property
    def is_active(self) -> bool:
        return self._bus is not None

    def handle_key(self, event: 'KeyEvent') -> None:
        raise NotImplementedError

    def activate(self, bus: Optional['KeyboardBus'] = None) -> None:
        """
        Attach to a bus (the process-wide bus by default).

        Activating an already active component is a no-op.
        """
        if self._bus is not None:
            return

        if bus is None:
            from .bus import get_default_bus
            bus = get_default_bus()

        bus.add_listener(self.handle_key)
        self._bus = bus

    def deactivate(self) -> None:
        """Detach from the bus. Safe to call more than once."""
        if self._bus is not None:
            self._bus.remove_listener(self.handle_key)
            self._bus = None

    @contextmanager
    def activated(self, bus: Optional['KeyboardBus'] = None) -> Iterator['KeyboardComponent']:
        """Keep the component attached for the duration of a block."""
        self.activate(bus)
        try:
            yield self
        finally:
            self.deactivate()

    def __enter__(self):
        self.activate()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.deactivate()
        return False
