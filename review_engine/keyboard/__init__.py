"""
Keyboard Input Package

Key events, the process-wide keyboard bus, and the exact-match shortcut
primitive shared by the navigator, the review dispatcher and the help
overlay.

Usage:
    from review_engine.keyboard import KeyboardBus, KeyEvent, TEXT_INPUT

    bus = KeyboardBus()
    with navigator.activated(bus):
        bus.dispatch(KeyEvent('ArrowRight'))
        bus.dispatch(KeyEvent('k', ctrl=True, target=TEXT_INPUT))
"""

from .events import (
    KeyEvent,
    FocusTarget,
    BODY,
    TEXT_INPUT,
    TEXT_AREA,
)
from .component import KeyboardComponent
from .bus import KeyboardBus, get_default_bus
from .shortcuts import (
    ShortcutBinding,
    ShortcutInfo,
    KeyboardShortcuts,
    match_binding,
    format_shortcut,
)

__all__ = [
    'KeyEvent',
    'FocusTarget',
    'BODY',
    'TEXT_INPUT',
    'TEXT_AREA',
    'KeyboardComponent',
    'KeyboardBus',
    'get_default_bus',
    'ShortcutBinding',
    'ShortcutInfo',
    'KeyboardShortcuts',
    'match_binding',
    'format_shortcut',
]
