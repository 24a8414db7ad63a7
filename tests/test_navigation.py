"""
Tests for document navigation and the quick switcher.
"""

from review_engine.keyboard import KeyboardBus, KeyEvent, FocusTarget, TEXT_INPUT
from review_engine.navigation import DocumentNavigator, DocumentRef, QuickSwitcher


def make_documents(count):
    return [DocumentRef(id=f"doc-{i}", name=f"file-{i}.pdf") for i in range(count)]


class TestDocumentNavigator:
    """Tests for keyboard document navigation."""

    def setup_method(self):
        self.documents = make_documents(5)
        self.selected = []
        self.switcher_opened = 0
        self.navigator = DocumentNavigator(
            self.documents,
            selected_id='doc-0',
            on_select=self.select,
            on_open_switcher=self.open_switcher,
        )

    def select(self, doc_id):
        self.selected.append(doc_id)
        self.navigator.update(selected_id=doc_id)

    def open_switcher(self):
        self.switcher_opened += 1

    def press(self, key, **kwargs):
        event = KeyEvent(key, **kwargs)
        self.navigator.handle_key(event)
        return event

    def test_right_moves_next(self):
        event = self.press('ArrowRight')
        assert self.selected == ['doc-1']
        assert event.default_prevented

    def test_left_at_start_wraps_to_last(self):
        self.press('ArrowLeft')
        assert self.selected == ['doc-4']

    def test_right_at_end_wraps_to_first(self):
        self.navigator.update(selected_id='doc-4')
        self.press('ArrowRight')
        assert self.selected == ['doc-0']

    def test_left_moves_previous(self):
        self.navigator.update(selected_id='doc-3')
        self.press('ArrowLeft')
        assert self.selected == ['doc-2']

    def test_digit_jump(self):
        event = self.press('3')
        assert self.selected == ['doc-2']
        assert event.default_prevented

    def test_out_of_range_digit_ignored(self):
        event = self.press('7')
        assert self.selected == []
        assert not event.default_prevented

    def test_zero_is_not_a_jump(self):
        self.press('0')
        assert self.selected == []

    def test_unknown_selection_right_selects_first(self):
        self.navigator.update(selected_id='missing')
        self.press('ArrowRight')
        assert self.selected == ['doc-0']

    def test_unknown_selection_left_selects_last(self):
        self.navigator.update(selected_id='missing')
        self.press('ArrowLeft')
        assert self.selected == ['doc-4']

    def test_index_resolved_from_live_list(self):
        reordered = list(reversed(self.documents))
        self.navigator.update(documents=reordered)
        self.press('ArrowRight')
        # doc-0 is now last, so next wraps to the new first entry
        assert self.selected == ['doc-4']

    def test_modified_arrows_ignored(self):
        self.press('ArrowRight', shift=True)
        self.press('ArrowRight', ctrl=True)
        self.press('ArrowLeft', alt=True)
        assert self.selected == []

    def test_ctrl_k_opens_switcher(self):
        event = self.press('k', ctrl=True)
        assert self.switcher_opened == 1
        assert event.default_prevented
        assert self.selected == []

    def test_cmd_k_opens_switcher_while_typing(self):
        self.press('k', meta=True, target=TEXT_INPUT)
        assert self.switcher_opened == 1

    def test_plain_k_does_nothing(self):
        self.press('k')
        assert self.switcher_opened == 0

    def test_ctrl_k_without_switcher_callback(self):
        navigator = DocumentNavigator(self.documents, 'doc-0', on_select=self.select)
        event = KeyEvent('k', ctrl=True)
        navigator.handle_key(event)
        assert event.default_prevented

    def test_editable_focus_suppresses_navigation(self):
        self.press('ArrowRight', target=TEXT_INPUT)
        self.press('2', target=FocusTarget(tag='DIV', content_editable=True))
        assert self.selected == []

    def test_disabled(self):
        self.navigator.enabled = False
        self.press('ArrowRight')
        self.press('k', ctrl=True)
        assert self.selected == []
        assert self.switcher_opened == 0

    def test_empty_list(self):
        self.navigator.update(documents=[])
        self.press('ArrowRight')
        self.press('k', ctrl=True)
        assert self.selected == []
        assert self.switcher_opened == 0

    def test_accepts_mappings(self):
        navigator = DocumentNavigator(
            [{'id': 'a'}, {'id': 'b'}], 'a', on_select=self.selected.append
        )
        navigator.handle_key(KeyEvent('ArrowRight'))
        assert self.selected == ['b']

    def test_catalogue(self):
        keys = [info.key for info in self.navigator.shortcuts]
        assert keys == ['←/→', '1-9', 'Cmd+K']

    def test_sequence_through_bus(self):
        bus = KeyboardBus()
        with self.navigator.activated(bus):
            for key in ['ArrowRight', 'ArrowRight', '5', 'ArrowRight']:
                bus.dispatch(KeyEvent(key))
        bus.dispatch(KeyEvent('ArrowRight'))
        assert self.selected == ['doc-1', 'doc-2', 'doc-4', 'doc-0']


class TestQuickSwitcher:
    """Tests for the quick file switcher."""

    def setup_method(self):
        self.documents = [
            DocumentRef('a', 'Master Agreement.pdf', 'contract', 'completed'),
            DocumentRef('b', 'Amendment 1.pdf', 'amendment', 'processing'),
            DocumentRef('c', 'Pricing Exhibit.pdf', 'exhibit', 'failed'),
        ]
        self.selected = []
        self.open_changes = []
        self.switcher = QuickSwitcher(
            self.documents,
            on_select=self.selected.append,
            on_open_change=self.open_changes.append,
        )
        self.switcher.open()

    def test_open_resets_state(self):
        self.switcher.query = 'pricing'
        self.switcher.open()
        assert self.switcher.query == ''
        assert self.switcher.highlighted_index == 0
        assert self.open_changes == [True, True]

    def test_filter_by_name_type_status(self):
        self.switcher.query = 'AMEND'
        assert [d.id for d in self.switcher.filtered] == ['b']
        self.switcher.query = 'exhibit'
        assert [d.id for d in self.switcher.filtered] == ['c']
        self.switcher.query = 'completed'
        assert [d.id for d in self.switcher.filtered] == ['a']

    def test_arrow_keys_wrap(self):
        self.switcher.handle_key(KeyEvent('ArrowUp'))
        assert self.switcher.highlighted_index == 2
        self.switcher.handle_key(KeyEvent('ArrowDown'))
        assert self.switcher.highlighted_index == 0

    def test_enter_selects_and_closes(self):
        self.switcher.handle_key(KeyEvent('ArrowDown'))
        event = KeyEvent('Enter')
        self.switcher.handle_key(event)
        assert self.selected == ['b']
        assert not self.switcher.is_open
        assert event.default_prevented

    def test_enter_with_no_matches(self):
        self.switcher.query = 'nothing matches this'
        self.switcher.handle_key(KeyEvent('Enter'))
        assert self.selected == []
        assert self.switcher.is_open

    def test_highlight_clamped_when_filter_shrinks(self):
        self.switcher.handle_key(KeyEvent('ArrowUp'))
        self.switcher.query = 'pdf'
        assert self.switcher.highlighted_index == 2
        self.switcher.query = 'amendment'
        assert self.switcher.highlighted_index == 0

    def test_escape_closes(self):
        self.switcher.handle_key(KeyEvent('Escape'))
        assert not self.switcher.is_open
        assert self.open_changes[-1] is False

    def test_keys_ignored_when_closed(self):
        self.switcher.close()
        self.switcher.handle_key(KeyEvent('Enter'))
        assert self.selected == []
