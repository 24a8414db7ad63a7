"""
Shortcut Matching

The shared primitive behind every keyboard component: a ShortcutBinding
describes one key combination and the action it stands for, and matching
is exact on modifiers.

Matching rules:
A binding for plain 'a' must not fire on Ctrl+A (select all) and a
binding for ArrowLeft must not fire on Shift+ArrowLeft (extend
selection). An unset modifier flag therefore means "must be released",
never "don't care".
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple

from loguru import logger

from .component import KeyboardComponent
from .events import KeyEvent

# Display names for keys whose DOM name is not what users read
KEY_LABELS = {
    'arrowleft': '←',
    'arrowright': '→',
    'arrowup': '↑',
    'arrowdown': '↓',
    'escape': 'Esc',
    'tab': 'Tab',
    'enter': 'Enter',
}


@dataclass(frozen=True)
class ShortcutBinding:
    """
    One key combination mapped to an action.

    Ctrl and Cmd (meta) both satisfy `requires_ctrl`.
    """
    key: str
    action: Any = None
    requires_ctrl: bool = False
    requires_shift: bool = False
    requires_alt: bool = False
    description: str = ''

    def matches(self, event: KeyEvent) -> bool:
        """Check whether a key event triggers this binding."""
        if event.key.lower() != self.key.lower():
            return False
        if event.command != self.requires_ctrl:
            return False
        if event.shift != self.requires_shift:
            return False
        return event.alt == self.requires_alt


@dataclass(frozen=True)
class ShortcutInfo:
    """A legend entry for help surfaces. Never used for matching."""
    key: str
    description: str

    @property
    def keys(self) -> List[str]:
        """Individual key caps, e.g. 'Shift+Tab' -> ['Shift', 'Tab']."""
        if self.key == '+':
            return ['+']
        return self.key.split('+')

    def to_dict(self) -> dict:
        return {'key': self.key, 'description': self.description}


def match_binding(
    bindings: Iterable[ShortcutBinding],
    event: KeyEvent,
) -> Optional[ShortcutBinding]:
    """Return the first binding that matches the event, if any."""
    for binding in bindings:
        if binding.matches(event):
            return binding
    return None


def format_shortcut(binding: ShortcutBinding) -> str:
    """
    Render a binding for display.

    Args:
        binding: Binding to format

    Returns:
        Combo string such as 'Ctrl+Shift+S' or '←'
    """
    parts = []

    if binding.requires_ctrl:
        parts.append('Ctrl')
    if binding.requires_shift:
        parts.append('Shift')
    if binding.requires_alt:
        parts.append('Alt')

    parts.append(KEY_LABELS.get(binding.key.lower(), binding.key.upper()))

    return '+'.join(parts)


# Combos that still fire while the user is typing in a text control
EDITABLE_PASSTHROUGH = (
    ShortcutBinding('s', requires_ctrl=True),
    ShortcutBinding('Enter', requires_ctrl=True),
)


class KeyboardShortcuts(KeyboardComponent):
    """
    Generic shortcut handler over (binding, callback) pairs.

    The first matching binding wins. While focus is in an editable control
    only the Ctrl+S and Ctrl+Enter combos get through.

    Usage:
        shortcuts = KeyboardShortcuts([
            (ShortcutBinding('?', 'help', requires_shift=True), toggle_help),
        ])
        with shortcuts.activated(bus):
            bus.dispatch(KeyEvent('?', shift=True))
    """

    def __init__(
        self,
        shortcuts: Sequence[Tuple[ShortcutBinding, Callable[[], Any]]],
        enabled: bool = True,
    ):
        super().__init__(enabled=enabled)
        self._shortcuts = list(shortcuts)

    def handle_key(self, event: KeyEvent) -> None:
        if not self.enabled:
            return

        if event.in_editable and match_binding(EDITABLE_PASSTHROUGH, event) is None:
            return

        for binding, callback in self._shortcuts:
            if binding.matches(event):
                event.prevent_default()
                logger.debug(f"Shortcut {format_shortcut(binding)} -> {binding.action}")
                callback()
                break

    @property
    def shortcuts(self) -> List[ShortcutInfo]:
        """Legend for the registered bindings."""
        return [
            ShortcutInfo(format_shortcut(binding), binding.description)
            for binding, _ in self._shortcuts
        ]
