"""
Review Workflow Engine

Keyboard-driven validation of AI-extracted document fields.

Features:
- Debounced, single-flight auto-save with a save-status machine
- Document navigation with wraparound, digit jumps and a quick switcher
- Field review shortcuts (approve, reject, flag, edit, jump to source)
- Focus-aware dispatch: shortcuts stay quiet while the user is typing,
  except Ctrl+S (save) and Ctrl+K (switcher)
- Confidence gating: which OCR/hybrid extractions need a human, why, and
  what caveats to add to extraction prompts

Quick Start:
    from review_engine import ConfidenceGate, ExtractionMetadata

    outcome = ConfidenceGate().evaluate(ExtractionMetadata('ocr', 0.65))
    print(outcome.requires_review)   # True
    print(outcome.justification)     # "... OCR confidence is 65% ..."

    # Inside an asyncio event loop
    from review_engine import KeyboardBus, KeyEvent, ReviewSession

    bus = KeyboardBus()
    session = ReviewSession(documents, fields, save=persist)
    with session.activated(bus):
        bus.dispatch(KeyEvent('a'))               # approve, advance
        bus.dispatch(KeyEvent('s', ctrl=True))    # save now

CLI Usage:
    review-engine gate --method ocr --confidence 0.65
    review-engine batch extractions.yaml
    review-engine shortcuts
"""

__version__ = '1.0.0'

# Auto-save
from .autosave import (
    AutoSaveController,
    SaveState,
    SaveStatus,
    describe_status,
    render_status,
)

# Keyboard
from .keyboard import (
    KeyEvent,
    FocusTarget,
    KeyboardBus,
    KeyboardComponent,
    KeyboardShortcuts,
    ShortcutBinding,
    ShortcutInfo,
    get_default_bus,
    match_binding,
    format_shortcut,
)

# Navigation
from .navigation import (
    DocumentNavigator,
    DocumentRef,
    QuickSwitcher,
)

# Review
from .review import (
    ReviewShortcutDispatcher,
    ReviewActions,
    ReviewAction,
    ReviewField,
    ReviewStatus,
    ReviewProgress,
    HelpOverlay,
    help_groups,
)

# Decision
from .decision import (
    ConfidenceGate,
    ExtractionMetadata,
    ExtractionMethod,
    ReviewRequirement,
    requires_review,
    justification,
    prompt_guidance,
    enhance_prompt,
)

# Session, config, errors
from .session import ReviewSession
from .config import EngineConfig, load_config
from .errors import ReviewEngineError, InvalidMetadataError, ConfigError

__all__ = [
    # Version
    '__version__',

    # Auto-save
    'AutoSaveController',
    'SaveState',
    'SaveStatus',
    'describe_status',
    'render_status',

    # Keyboard
    'KeyEvent',
    'FocusTarget',
    'KeyboardBus',
    'KeyboardComponent',
    'KeyboardShortcuts',
    'ShortcutBinding',
    'ShortcutInfo',
    'get_default_bus',
    'match_binding',
    'format_shortcut',

    # Navigation
    'DocumentNavigator',
    'DocumentRef',
    'QuickSwitcher',

    # Review
    'ReviewShortcutDispatcher',
    'ReviewActions',
    'ReviewAction',
    'ReviewField',
    'ReviewStatus',
    'ReviewProgress',
    'HelpOverlay',
    'help_groups',

    # Decision
    'ConfidenceGate',
    'ExtractionMetadata',
    'ExtractionMethod',
    'ReviewRequirement',
    'requires_review',
    'justification',
    'prompt_guidance',
    'enhance_prompt',

    # Session
    'ReviewSession',
    'EngineConfig',
    'load_config',

    # Errors
    'ReviewEngineError',
    'InvalidMetadataError',
    'ConfigError',
]
