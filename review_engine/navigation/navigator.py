"""
Document Navigator

Keyboard movement across the ordered list of documents in a review
session.

Shortcuts:
- ArrowLeft / ArrowRight: previous / next document, wrapping at the ends
- 1-9: jump to a document by its 1-based position
- Ctrl+K / Cmd+K: open the quick switcher (works while typing)

The current position is looked up from the live document list on every
key press, never cached, because the host may reorder or replace the list
between presses.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Mapping, Optional, Sequence

from loguru import logger

from ..keyboard import (
    KeyEvent,
    KeyboardComponent,
    ShortcutBinding,
    ShortcutInfo,
    match_binding,
)


class NavigationAction(Enum):
    """Actions the navigator recognizes."""

    OPEN_SWITCHER = 'open_switcher'
    PREVIOUS = 'previous'
    NEXT = 'next'
    JUMP = 'jump'


@dataclass(frozen=True)
class DocumentRef:
    """A document in the review list. Only `id` is required for navigation."""
    id: str
    name: str = ''
    document_type: Optional[str] = None
    status: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'DocumentRef':
        return cls(
            id=str(data['id']),
            name=data.get('name', data.get('file_name', '')),
            document_type=data.get('document_type'),
            status=data.get('status', data.get('parsing_status')),
        )


def document_id(document: Any) -> Any:
    """Read the id of a DocumentRef, any object with `.id`, or a mapping."""
    if isinstance(document, Mapping):
        return document['id']
    return document.id


_UNSET = object()

SWITCHER_BINDING = ShortcutBinding('k', NavigationAction.OPEN_SWITCHER, requires_ctrl=True)

NAVIGATION_BINDINGS = (
    ShortcutBinding('ArrowLeft', NavigationAction.PREVIOUS),
    ShortcutBinding('ArrowRight', NavigationAction.NEXT),
) + tuple(
    ShortcutBinding(str(digit), NavigationAction.JUMP) for digit in range(1, 10)
)


class DocumentNavigator(KeyboardComponent):
    """
    Maps key presses to document selection.

    The navigator never changes the selection itself: it calls
    `on_select(id)` and the host updates `selected_id`.
    """

    SHORTCUTS = (
        ShortcutInfo('←/→', 'Navigate between documents'),
        ShortcutInfo('1-9', 'Quick jump to document'),
        ShortcutInfo('Cmd+K', 'Quick file switcher'),
    )

    def __init__(
        self,
        documents: Sequence[Any],
        selected_id: Any,
        on_select: Callable[[Any], None],
        on_open_switcher: Optional[Callable[[], None]] = None,
        enabled: bool = True,
    ):
        super().__init__(enabled=enabled)
        self.documents = documents
        self.selected_id = selected_id
        self.on_select = on_select
        self.on_open_switcher = on_open_switcher

    @property
    def shortcuts(self) -> List[ShortcutInfo]:
        return list(self.SHORTCUTS)

    def update(self, documents: Optional[Sequence[Any]] = None, selected_id: Any = _UNSET) -> None:
        """Refresh the host-owned document list and/or selection."""
        if documents is not None:
            self.documents = documents
        if selected_id is not _UNSET:
            self.selected_id = selected_id

    def current_index(self) -> int:
        """Position of the selected document, or -1 if it is not in the list."""
        for index, document in enumerate(self.documents):
            if document_id(document) == self.selected_id:
                return index
        return -1

    def handle_key(self, event: KeyEvent) -> None:
        if not self.enabled or not self.documents:
            return

        if SWITCHER_BINDING.matches(event):
            event.prevent_default()
            if self.on_open_switcher:
                self.on_open_switcher()
            return

        if event.in_editable:
            return

        binding = match_binding(NAVIGATION_BINDINGS, event)
        if binding is None:
            return

        documents = self.documents
        count = len(documents)
        index = self.current_index()

        if binding.action == NavigationAction.PREVIOUS:
            event.prevent_default()
            target = index - 1 if index > 0 else count - 1
        elif binding.action == NavigationAction.NEXT:
            event.prevent_default()
            target = index + 1 if index < count - 1 else 0
        else:
            target = int(event.key) - 1
            if target >= count:
                return
            event.prevent_default()

        logger.debug(f"Navigating from document {index} to {target}")
        self.on_select(document_id(documents[target]))
