"""
Keyboard Events

Host-neutral representation of a key press and the element that had focus
when it happened. Hosts translate their toolkit's native events into
KeyEvent before pushing them onto a KeyboardBus.
"""

from __future__ import annotations

from dataclasses import dataclass, field

# Tags whose focus means the user is typing text
EDITABLE_TAGS = frozenset({'INPUT', 'TEXTAREA'})


@dataclass(frozen=True)
class FocusTarget:
    """The element that had focus when a key was pressed."""

    tag: str = 'BODY'
    content_editable: bool = False

    @property
    def is_editable(self) -> bool:
        """Whether focus is inside a text-entry control."""
        return self.tag.upper() in EDITABLE_TAGS or self.content_editable


BODY = FocusTarget()
TEXT_INPUT = FocusTarget(tag='INPUT')
TEXT_AREA = FocusTarget(tag='TEXTAREA')


@dataclass
class KeyEvent:
    """
    A single key press.

    `key` uses DOM key names ('a', 'Tab', 'ArrowLeft', 'Enter', ...).
    `meta` is the Cmd key on macOS; shortcut matching treats it the same
    as Ctrl.
    """
    key: str
    ctrl: bool = False
    meta: bool = False
    shift: bool = False
    alt: bool = False
    target: FocusTarget = field(default=BODY)
    default_prevented: bool = False

    @property
    def command(self) -> bool:
        """Ctrl on Windows/Linux, Cmd on macOS."""
        return self.ctrl or self.meta

    @property
    def in_editable(self) -> bool:
        return self.target.is_editable

    def prevent_default(self) -> None:
        """Suppress the host's default action for this key."""
        self.default_prevented = True
