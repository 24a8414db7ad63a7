"""
Field Review Package

Keyboard-driven review actions, the help legend, and the field records
the operator approves, rejects, flags or corrects.
"""

from .review_data import (
    ReviewField,
    ReviewStatus,
    ReviewProgress,
    snapshot_fields,
)
from .dispatcher import (
    ReviewShortcutDispatcher,
    ReviewActions,
    ReviewAction,
)
from .help import (
    HelpOverlay,
    ShortcutGroup,
    help_groups,
)

__all__ = [
    'ReviewField',
    'ReviewStatus',
    'ReviewProgress',
    'snapshot_fields',
    'ReviewShortcutDispatcher',
    'ReviewActions',
    'ReviewAction',
    'HelpOverlay',
    'ShortcutGroup',
    'help_groups',
]
