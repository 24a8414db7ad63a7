"""
Auto-Save Package

Debounced, single-flight persistence for review edits, plus the status
label hosts show next to the editor.

Usage:
    from review_engine.autosave import AutoSaveController, describe_status

    autosave = AutoSaveController(fields, persist, delay=2.0)
    autosave.update(edited_fields)
    print(describe_status(autosave.state))
"""

from .controller import (
    AutoSaveController,
    SaveState,
    SaveStatus,
    DEFAULT_DELAY,
    SAVED_RESET_DELAY,
)
from .indicator import (
    describe_status,
    render_status,
    humanize_elapsed,
)

__all__ = [
    'AutoSaveController',
    'SaveState',
    'SaveStatus',
    'DEFAULT_DELAY',
    'SAVED_RESET_DELAY',
    'describe_status',
    'render_status',
    'humanize_elapsed',
]
