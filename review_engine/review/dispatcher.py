"""
Review Shortcut Dispatcher

Keyboard vocabulary for field-by-field review.

Shortcuts:
- A: Approve current field
- R: Reject current field
- F: Flag for review
- E: Edit current field
- J: Jump to source page
- Tab / →: Next field
- Shift+Tab / ←: Previous field
- Ctrl+S / Cmd+S: Save progress (works while typing)

Every recognized key has its default action prevented, even when the host
did not wire a handler for it, so Tab never moves browser focus and 'j'
never types into the page behind the review panel.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional

from loguru import logger

from ..keyboard import (
    KeyEvent,
    KeyboardComponent,
    ShortcutBinding,
    ShortcutInfo,
    match_binding,
)

Handler = Callable[[], Any]


class ReviewAction(Enum):
    """The fixed review vocabulary."""

    APPROVE = 'approve'
    REJECT = 'reject'
    FLAG = 'flag'
    EDIT = 'edit'
    JUMP_TO_SOURCE = 'jump_to_source'
    NEXT = 'next'
    PREVIOUS = 'previous'
    SAVE = 'save'


@dataclass
class ReviewActions:
    """Optional handler per review action. A missing handler is a no-op."""
    on_approve: Optional[Handler] = None
    on_reject: Optional[Handler] = None
    on_flag: Optional[Handler] = None
    on_edit: Optional[Handler] = None
    on_jump_to_source: Optional[Handler] = None
    on_next: Optional[Handler] = None
    on_previous: Optional[Handler] = None
    on_save: Optional[Handler] = None

    def handler_for(self, action: ReviewAction) -> Optional[Handler]:
        return getattr(self, f'on_{action.value}')


SAVE_BINDING = ShortcutBinding('s', ReviewAction.SAVE, requires_ctrl=True)

REVIEW_BINDINGS = (
    ShortcutBinding('a', ReviewAction.APPROVE),
    ShortcutBinding('r', ReviewAction.REJECT),
    ShortcutBinding('f', ReviewAction.FLAG),
    ShortcutBinding('e', ReviewAction.EDIT),
    ShortcutBinding('j', ReviewAction.JUMP_TO_SOURCE),
    ShortcutBinding('Tab', ReviewAction.NEXT),
    ShortcutBinding('Tab', ReviewAction.PREVIOUS, requires_shift=True),
    ShortcutBinding('ArrowRight', ReviewAction.NEXT),
    ShortcutBinding('ArrowLeft', ReviewAction.PREVIOUS),
)


class ReviewShortcutDispatcher(KeyboardComponent):
    """Routes key presses to review action handlers."""

    SHORTCUTS = (
        ShortcutInfo('A', 'Approve field'),
        ShortcutInfo('R', 'Reject field'),
        ShortcutInfo('F', 'Flag for review'),
        ShortcutInfo('E', 'Edit field'),
        ShortcutInfo('J', 'Jump to source'),
        ShortcutInfo('Tab', 'Next field'),
        ShortcutInfo('Shift+Tab', 'Previous field'),
        ShortcutInfo('←/→', 'Navigate fields'),
        ShortcutInfo('Ctrl+S', 'Save progress'),
    )

    def __init__(self, actions: Optional[ReviewActions] = None, enabled: bool = True):
        super().__init__(enabled=enabled)
        self.actions = actions or ReviewActions()

    @property
    def shortcuts(self) -> List[ShortcutInfo]:
        return list(self.SHORTCUTS)

    def resolve(self, event: KeyEvent) -> Optional[ReviewAction]:
        """Action a key press stands for, ignoring focus and enabled state."""
        if SAVE_BINDING.matches(event):
            return ReviewAction.SAVE
        binding = match_binding(REVIEW_BINDINGS, event)
        return binding.action if binding else None

    def handle_key(self, event: KeyEvent) -> None:
        if not self.enabled:
            return

        if SAVE_BINDING.matches(event):
            self._fire(ReviewAction.SAVE, event)
            return

        if event.in_editable:
            return

        binding = match_binding(REVIEW_BINDINGS, event)
        if binding is not None:
            self._fire(binding.action, event)

    def _fire(self, action: ReviewAction, event: KeyEvent) -> None:
        event.prevent_default()
        handler = self.actions.handler_for(action)
        if handler is None:
            return
        logger.debug(f"Review shortcut {event.key!r} -> {action.value}")
        handler()
