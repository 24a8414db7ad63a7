"""
Shortcut Help

The grouped legend shown in the keyboard help dialog, and the overlay
state that '?' toggles.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from ..keyboard import KeyboardShortcuts, ShortcutBinding, ShortcutInfo
from ..navigation.navigator import DocumentNavigator
from .dispatcher import ReviewShortcutDispatcher


@dataclass(frozen=True)
class ShortcutGroup:
    """A titled block of legend entries."""
    title: str
    shortcuts: Tuple[ShortcutInfo, ...]

    def to_dict(self) -> dict:
        return {
            'title': self.title,
            'shortcuts': [s.to_dict() for s in self.shortcuts],
        }


def _pick(catalogue, *keys: str) -> Tuple[ShortcutInfo, ...]:
    by_key = {info.key: info for info in catalogue}
    return tuple(by_key[key] for key in keys)


def help_groups() -> List[ShortcutGroup]:
    """Legend built from the navigator and dispatcher catalogues."""
    review = ReviewShortcutDispatcher.SHORTCUTS
    return [
        ShortcutGroup('Document Navigation', DocumentNavigator.SHORTCUTS),
        ShortcutGroup('Field Review', _pick(review, 'A', 'R', 'F', 'E', 'J')),
        ShortcutGroup('Field Navigation', _pick(review, 'Tab', 'Shift+Tab', '←/→')),
        ShortcutGroup('General', _pick(review, 'Ctrl+S') + (
            ShortcutInfo('?', 'Toggle this help'),
            ShortcutInfo('Esc', 'Close dialogs'),
        )),
    ]


class HelpOverlay(KeyboardShortcuts):
    """
    Open/closed state of the help dialog.

    '?' toggles it (with or without Shift, depending on the keyboard
    layout) unless the user is typing; Escape closes it.
    """

    def __init__(self, enabled: bool = True):
        super().__init__(
            [
                (ShortcutBinding('?', 'toggle_help', description='Toggle this help'), self.toggle),
                (ShortcutBinding('?', 'toggle_help', requires_shift=True), self.toggle),
                (ShortcutBinding('Escape', 'close_help', description='Close dialogs'), self.close),
            ],
            enabled=enabled,
        )
        self.is_open = False

    @property
    def groups(self) -> List[ShortcutGroup]:
        return help_groups()

    def toggle(self) -> None:
        self.is_open = not self.is_open

    def close(self) -> None:
        self.is_open = False
