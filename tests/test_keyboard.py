"""
Tests for the shared keyboard primitives.
"""

import pytest

from review_engine.keyboard import (
    KeyboardBus,
    KeyboardComponent,
    KeyboardShortcuts,
    KeyEvent,
    FocusTarget,
    ShortcutBinding,
    ShortcutInfo,
    TEXT_AREA,
    TEXT_INPUT,
    format_shortcut,
    get_default_bus,
    match_binding,
)


class Recorder(KeyboardComponent):
    """Component that records the keys it sees."""

    def __init__(self):
        super().__init__()
        self.keys = []

    def handle_key(self, event):
        self.keys.append(event.key)


class TestFocusTarget:
    """Tests for editable focus detection."""

    def test_inputs_are_editable(self):
        assert TEXT_INPUT.is_editable
        assert TEXT_AREA.is_editable
        assert FocusTarget(tag='input').is_editable

    def test_content_editable(self):
        assert FocusTarget(tag='DIV', content_editable=True).is_editable

    def test_body_not_editable(self):
        assert not FocusTarget().is_editable
        assert not FocusTarget(tag='BUTTON').is_editable


class TestShortcutBinding:
    """Tests for exact modifier matching."""

    def test_plain_key(self):
        binding = ShortcutBinding('a', 'approve')
        assert binding.matches(KeyEvent('a'))
        assert binding.matches(KeyEvent('A'))

    def test_unset_modifier_must_be_absent(self):
        binding = ShortcutBinding('a', 'approve')
        assert not binding.matches(KeyEvent('a', ctrl=True))
        assert not binding.matches(KeyEvent('a', meta=True))
        assert not binding.matches(KeyEvent('a', alt=True))
        assert not binding.matches(KeyEvent('a', shift=True))

    def test_ctrl_or_cmd(self):
        binding = ShortcutBinding('s', 'save', requires_ctrl=True)
        assert binding.matches(KeyEvent('s', ctrl=True))
        assert binding.matches(KeyEvent('s', meta=True))
        assert not binding.matches(KeyEvent('s'))
        assert not binding.matches(KeyEvent('s', ctrl=True, shift=True))

    def test_shift(self):
        binding = ShortcutBinding('Tab', 'previous', requires_shift=True)
        assert binding.matches(KeyEvent('Tab', shift=True))
        assert not binding.matches(KeyEvent('Tab'))

    def test_match_binding_first_wins(self):
        bindings = [ShortcutBinding('x', 'first'), ShortcutBinding('x', 'second')]
        assert match_binding(bindings, KeyEvent('x')).action == 'first'
        assert match_binding(bindings, KeyEvent('y')) is None

    def test_format_shortcut(self):
        assert format_shortcut(ShortcutBinding('s', requires_ctrl=True, requires_shift=True)) == 'Ctrl+Shift+S'
        assert format_shortcut(ShortcutBinding('ArrowLeft')) == '←'
        assert format_shortcut(ShortcutBinding('Enter', requires_alt=True)) == 'Alt+Enter'

    def test_shortcut_info_keys(self):
        assert ShortcutInfo('Shift+Tab', '').keys == ['Shift', 'Tab']
        assert ShortcutInfo('1-9', '').keys == ['1-9']


class TestKeyboardBus:
    """Tests for serial event delivery."""

    def setup_method(self):
        self.bus = KeyboardBus()

    def test_delivers_in_registration_order(self):
        seen = []
        self.bus.add_listener(lambda e: seen.append(('first', e.key)))
        self.bus.add_listener(lambda e: seen.append(('second', e.key)))
        self.bus.dispatch(KeyEvent('a'))
        assert seen == [('first', 'a'), ('second', 'a')]

    def test_add_twice_is_noop(self):
        recorder = Recorder()
        self.bus.add_listener(recorder.handle_key)
        self.bus.add_listener(recorder.handle_key)
        self.bus.dispatch(KeyEvent('a'))
        assert recorder.keys == ['a']
        assert self.bus.listener_count == 1

    def test_remove_unknown_listener(self):
        self.bus.remove_listener(lambda e: None)
        assert self.bus.listener_count == 0

    def test_reentrant_dispatch_is_queued(self):
        seen = []

        def first(event):
            seen.append(('first', event.key))
            if event.key == 'a':
                self.bus.dispatch(KeyEvent('b'))

        self.bus.add_listener(first)
        self.bus.add_listener(lambda e: seen.append(('second', e.key)))
        self.bus.dispatch(KeyEvent('a'))

        assert seen == [
            ('first', 'a'), ('second', 'a'),
            ('first', 'b'), ('second', 'b'),
        ]

    def test_failing_listener_does_not_block_others(self):
        seen = []

        def broken(event):
            raise RuntimeError("boom")

        self.bus.add_listener(broken)
        self.bus.add_listener(lambda e: seen.append(e.key))
        self.bus.dispatch(KeyEvent('a'))
        self.bus.dispatch(KeyEvent('b'))
        assert seen == ['a', 'b']

    def test_default_bus_is_shared(self):
        assert get_default_bus() is get_default_bus()


class TestKeyboardComponent:
    """Tests for scoped listener acquisition."""

    def setup_method(self):
        self.bus = KeyboardBus()
        self.recorder = Recorder()

    def test_activate_and_deactivate(self):
        self.recorder.activate(self.bus)
        assert self.recorder.is_active
        self.bus.dispatch(KeyEvent('a'))
        self.recorder.deactivate()
        self.bus.dispatch(KeyEvent('b'))
        assert self.recorder.keys == ['a']
        assert self.bus.listener_count == 0

    def test_deactivate_twice(self):
        self.recorder.activate(self.bus)
        self.recorder.deactivate()
        self.recorder.deactivate()
        assert not self.recorder.is_active

    def test_activated_detaches_on_error(self):
        with pytest.raises(ValueError):
            with self.recorder.activated(self.bus):
                assert self.bus.listener_count == 1
                raise ValueError("teardown mid-flight")
        assert self.bus.listener_count == 0

    def test_context_manager_uses_default_bus(self):
        bus = get_default_bus()
        before = bus.listener_count
        with self.recorder:
            assert bus.listener_count == before + 1
        assert bus.listener_count == before


class TestKeyboardShortcuts:
    """Tests for the generic shortcut handler."""

    def setup_method(self):
        self.calls = []
        self.shortcuts = KeyboardShortcuts([
            (ShortcutBinding('s', 'save', requires_ctrl=True, description='Save'),
             lambda: self.calls.append('save')),
            (ShortcutBinding('Enter', 'submit', requires_ctrl=True, description='Submit'),
             lambda: self.calls.append('submit')),
            (ShortcutBinding('n', 'new', description='New'),
             lambda: self.calls.append('new')),
        ])

    def test_fires_and_prevents_default(self):
        event = KeyEvent('n')
        self.shortcuts.handle_key(event)
        assert self.calls == ['new']
        assert event.default_prevented

    def test_plain_keys_ignored_while_typing(self):
        event = KeyEvent('n', target=TEXT_INPUT)
        self.shortcuts.handle_key(event)
        assert self.calls == []
        assert not event.default_prevented

    def test_ctrl_s_and_ctrl_enter_pass_through_inputs(self):
        self.shortcuts.handle_key(KeyEvent('s', ctrl=True, target=TEXT_INPUT))
        self.shortcuts.handle_key(KeyEvent('Enter', ctrl=True, target=TEXT_AREA))
        assert self.calls == ['save', 'submit']

    def test_disabled(self):
        self.shortcuts.enabled = False
        self.shortcuts.handle_key(KeyEvent('n'))
        assert self.calls == []

    def test_legend(self):
        legend = [info.key for info in self.shortcuts.shortcuts]
        assert legend == ['Ctrl+S', 'Ctrl+Enter', 'N']
