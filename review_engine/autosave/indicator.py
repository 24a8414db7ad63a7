"""
Save Status Indicator

Turns a SaveState into the short label shown next to the review editor.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from rich.text import Text

from .controller import SaveState, SaveStatus


def humanize_elapsed(then: datetime, now: Optional[datetime] = None) -> str:
    """
    Describe how long ago a moment was, in coarse human units.

    Args:
        then: Earlier moment
        now: Reference moment (defaults to datetime.now())

    Returns:
        Phrase like 'less than a minute', '1 minute', '3 hours', '2 days'
    """
    now = now or datetime.now()
    seconds = max(0, int((now - then).total_seconds()))

    if seconds < 45:
        return 'less than a minute'

    minutes = round(seconds / 60)
    if minutes < 60:
        return '1 minute' if minutes == 1 else f'{minutes} minutes'

    hours = round(minutes / 60)
    if hours < 24:
        return 'about 1 hour' if hours == 1 else f'about {hours} hours'

    days = round(hours / 24)
    return '1 day' if days == 1 else f'{days} days'


def describe_status(state: SaveState, now: Optional[datetime] = None) -> str:
    """Plain-text label for a save state; empty when there is nothing to say."""
    if state.status == SaveStatus.SAVING:
        return 'Saving...'
    if state.status == SaveStatus.SAVED:
        return 'Saved'
    if state.status == SaveStatus.ERROR:
        return state.error or 'Failed to save'
    if state.last_saved is not None:
        return f'Last saved {humanize_elapsed(state.last_saved, now)} ago'
    return ''


# Rich styles per status
STATUS_STYLES = {
    SaveStatus.SAVING: 'blue',
    SaveStatus.SAVED: 'bold green',
    SaveStatus.ERROR: 'bold red',
    SaveStatus.IDLE: 'dim',
}

STATUS_ICONS = {
    SaveStatus.SAVING: '⟳',
    SaveStatus.SAVED: '✓',
    SaveStatus.ERROR: '✗',
    SaveStatus.IDLE: '☁',
}


def render_status(state: SaveState, now: Optional[datetime] = None) -> Text:
    """Styled label for terminal hosts."""
    label = describe_status(state, now)
    if not label:
        return Text('')
    return Text(f"{STATUS_ICONS[state.status]} {label}", style=STATUS_STYLES[state.status])
