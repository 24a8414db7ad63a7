"""
Quick Switcher

Filterable document picker opened with Ctrl/Cmd+K. While open it owns
the arrow keys, Enter and Escape; typing goes to the search query.
"""

from __future__ import annotations

from typing import Any, Callable, List, Mapping, Optional, Sequence

from loguru import logger

from ..keyboard import KeyEvent
from .navigator import document_id


def _searchable_text(document: Any) -> List[str]:
    if isinstance(document, Mapping):
        values = [
            document.get('name') or document.get('file_name'),
            document.get('document_type'),
            document.get('status') or document.get('parsing_status'),
        ]
    else:
        values = [
            getattr(document, 'name', None),
            getattr(document, 'document_type', None),
            getattr(document, 'status', None),
        ]
    return [str(v).lower() for v in values if v]


class QuickSwitcher:
    """
    State of the quick document switcher.

    Usage:
        switcher = QuickSwitcher(documents, on_select=session.select_document)
        switcher.open()
        switcher.query = 'invoice'
        switcher.handle_key(KeyEvent('Enter'))
    """

    def __init__(
        self,
        documents: Sequence[Any],
        on_select: Callable[[Any], None],
        on_open_change: Optional[Callable[[bool], None]] = None,
    ):
        self.documents = documents
        self.on_select = on_select
        self.on_open_change = on_open_change
        self.is_open = False
        self._query = ''
        self._highlighted = 0

    @property
    def query(self) -> str:
        return self._query

    @query.setter
    def query(self, value: str) -> None:
        self._query = value
        self._clamp_highlight()

    @property
    def highlighted_index(self) -> int:
        return self._highlighted

    @property
    def filtered(self) -> List[Any]:
        """Documents whose name, type or status contains the query."""
        needle = self._query.lower()
        if not needle:
            return list(self.documents)
        return [
            doc for doc in self.documents
            if any(needle in text for text in _searchable_text(doc))
        ]

    @property
    def highlighted(self) -> Optional[Any]:
        matches = self.filtered
        if 0 <= self._highlighted < len(matches):
            return matches[self._highlighted]
        return None

    def open(self) -> None:
        """Open with an empty query and the first entry highlighted."""
        self._query = ''
        self._highlighted = 0
        self._set_open(True)

    def close(self) -> None:
        self._set_open(False)

    def _set_open(self, is_open: bool) -> None:
        self.is_open = is_open
        if self.on_open_change:
            self.on_open_change(is_open)

    def _clamp_highlight(self) -> None:
        count = len(self.filtered)
        if self._highlighted >= count:
            self._highlighted = max(0, count - 1)

    def select(self, doc_id: Any) -> None:
        logger.debug(f"Quick switcher selected {doc_id}")
        self.on_select(doc_id)
        self.close()

    def handle_key(self, event: KeyEvent) -> None:
        """Handle a key pressed while the switcher has focus."""
        if not self.is_open:
            return

        count = len(self.filtered)
        key = event.key

        if key == 'ArrowDown':
            event.prevent_default()
            if count:
                self._highlighted = self._highlighted + 1 if self._highlighted < count - 1 else 0

        elif key == 'ArrowUp':
            event.prevent_default()
            if count:
                self._highlighted = self._highlighted - 1 if self._highlighted > 0 else count - 1

        elif key == 'Enter':
            event.prevent_default()
            document = self.highlighted
            if document is not None:
                self.select(document_id(document))

        elif key == 'Escape':
            event.prevent_default()
            self.close()
