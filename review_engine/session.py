"""
Review Session

Host-side composition of the engine for one document-review screen: the
document navigator, the review shortcut dispatcher, the help overlay and
the auto-saver, all driven by one keyboard bus and one set of fields.

Field cursor rules:
- approve/reject/flag update the current field, then advance one field
  (clamped at the last field)
- next/previous move the cursor, clamped at both ends
- with hide_approved on, approved fields drop out of the visible list
- the field list spans every document in the session, so changing the
  selected document leaves the cursor where it is; ArrowLeft/ArrowRight
  reach both the navigator and the dispatcher and move both
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Awaitable, Callable, Dict, Iterator, List, Mapping, Optional, Sequence

from loguru import logger

from .autosave import AutoSaveController
from .config import EngineConfig
from .decision import ConfidenceGate, ExtractionMetadata, ReviewRequirement
from .keyboard import KeyboardBus, KeyEvent
from .navigation import DocumentNavigator, QuickSwitcher, document_id
from .review import (
    HelpOverlay,
    ReviewActions,
    ReviewField,
    ReviewProgress,
    ReviewShortcutDispatcher,
    ReviewStatus,
    snapshot_fields,
)

SaveFn = Callable[[List[Dict[str, Any]]], Awaitable[Any]]


class ReviewSession:
    """
    One operator reviewing the fields of a set of documents.

    Must be created and driven from inside a running asyncio event loop.

    Usage:
        session = ReviewSession(documents, fields, save=persist)
        with session.activated(bus):
            bus.dispatch(KeyEvent('a'))        # approve current field
            bus.dispatch(KeyEvent('ArrowRight'))
        await session.autosave.wait()
    """

    def __init__(
        self,
        documents: Sequence[Any],
        fields: Sequence[ReviewField],
        save: SaveFn,
        metadata: Optional[Mapping[Any, ExtractionMetadata]] = None,
        config: Optional[EngineConfig] = None,
        on_jump_to_page: Optional[Callable[[int], None]] = None,
    ):
        self.config = config or EngineConfig()
        self.documents = list(documents)
        self.fields = list(fields)
        self.metadata: Dict[Any, ExtractionMetadata] = dict(metadata or {})
        self.on_jump_to_page = on_jump_to_page

        self.selected_id: Any = document_id(self.documents[0]) if self.documents else None
        self.current_field_index = 0
        self.hide_approved = False
        self.editing_field_id: Optional[str] = None

        self.gate = ConfidenceGate(self.config.review_threshold)

        self.autosave = AutoSaveController(
            snapshot_fields(self.fields),
            save,
            delay=self.config.autosave_delay,
            saved_reset_delay=self.config.saved_reset_delay,
            retry_dropped=self.config.retry_dropped_saves,
        )

        self.switcher = QuickSwitcher(self.documents, on_select=self.select_document)

        self.navigator = DocumentNavigator(
            self.documents,
            self.selected_id,
            on_select=self.select_document,
            on_open_switcher=self.switcher.open,
            enabled=bool(self.documents),
        )

        self.dispatcher = ReviewShortcutDispatcher(ReviewActions(
            on_approve=lambda: self._review_current(ReviewField.approve),
            on_reject=lambda: self._review_current(ReviewField.reject),
            on_flag=lambda: self._review_current(ReviewField.flag),
            on_edit=self.edit_current,
            on_jump_to_source=self.jump_to_source,
            on_next=self.next_field,
            on_previous=self.previous_field,
            on_save=self.autosave.request_save,
        ))

        self.help = HelpOverlay()

    # ------------------------------------------------------------------
    # Keyboard scope
    # ------------------------------------------------------------------

    @property
    def components(self):
        return (self.navigator, self.dispatcher, self.help)

    def activate(self, bus: Optional[KeyboardBus] = None) -> None:
        for component in self.components:
            component.activate(bus)

    def deactivate(self) -> None:
        for component in self.components:
            component.deactivate()

    @contextmanager
    def activated(self, bus: Optional[KeyboardBus] = None) -> Iterator['ReviewSession']:
        """Keep all keyboard components attached for the duration of a block."""
        self.activate(bus)
        try:
            yield self
        finally:
            self.deactivate()

    def handle_switcher_key(self, event: KeyEvent) -> None:
        """Route a key pressed inside the open quick switcher."""
        self.switcher.handle_key(event)

    def close(self) -> None:
        """Detach listeners and stop auto-save timers."""
        self.deactivate()
        self.autosave.close()

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    def select_document(self, doc_id: Any) -> None:
        self.selected_id = doc_id
        self.navigator.update(selected_id=doc_id)
        logger.debug(f"Selected document {doc_id}")

    def set_documents(self, documents: Sequence[Any]) -> None:
        """Replace the document list, keeping the selection when it survives."""
        self.documents = list(documents)
        self.switcher.documents = self.documents
        self.navigator.update(documents=self.documents)
        self.navigator.enabled = bool(self.documents)

    def review_requirement(self, doc_id: Any) -> Optional[ReviewRequirement]:
        """Gate outcome for a document, or None if its metadata is unknown."""
        meta = self.metadata.get(doc_id)
        if meta is None:
            return None
        return self.gate.evaluate(meta)

    def documents_needing_review(self) -> List[Any]:
        flagged = []
        for doc in self.documents:
            outcome = self.review_requirement(document_id(doc))
            if outcome is not None and outcome.requires_review:
                flagged.append(document_id(doc))
        return flagged

    # ------------------------------------------------------------------
    # Fields
    # ------------------------------------------------------------------

    @property
    def visible_fields(self) -> List[ReviewField]:
        if self.hide_approved:
            return [f for f in self.fields if f.status != ReviewStatus.APPROVED]
        return list(self.fields)

    @property
    def current_field(self) -> Optional[ReviewField]:
        visible = self.visible_fields
        if 0 <= self.current_field_index < len(visible):
            return visible[self.current_field_index]
        return None

    @property
    def progress(self) -> ReviewProgress:
        return ReviewProgress.from_fields(self.fields)

    def set_hide_approved(self, hide: bool) -> None:
        self.hide_approved = hide
        self._clamp_cursor()

    def next_field(self) -> None:
        self.current_field_index = min(self.current_field_index + 1, len(self.visible_fields) - 1)
        self._clamp_cursor()

    def previous_field(self) -> None:
        self.current_field_index = max(self.current_field_index - 1, 0)

    def edit_current(self) -> None:
        field = self.current_field
        self.editing_field_id = field.field_id if field else None

    def jump_to_source(self) -> None:
        field = self.current_field
        if field is None or not field.source_page:
            return
        if self.on_jump_to_page:
            self.on_jump_to_page(field.source_page)

    def correct_current(self, value: Any, notes: str = '') -> None:
        field = self.current_field
        if field is None:
            return
        field.correct(value, notes)
        self.editing_field_id = None
        self._fields_changed()

    def _review_current(self, mark: Callable[[ReviewField], None]) -> None:
        field = self.current_field
        if field is None:
            return
        mark(field)
        self._fields_changed()
        if self.hide_approved and field.status == ReviewStatus.APPROVED:
            # The approved field left the visible list; the next one slid into place
            self._clamp_cursor()
        else:
            self.next_field()

    def _clamp_cursor(self) -> None:
        last = len(self.visible_fields) - 1
        self.current_field_index = max(0, min(self.current_field_index, last))

    def _fields_changed(self) -> None:
        self.autosave.update(snapshot_fields(self.fields))

