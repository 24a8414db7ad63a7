"""
Document Navigation Package

Keyboard movement between documents and the quick switcher.
"""

from .navigator import (
    DocumentNavigator,
    DocumentRef,
    NavigationAction,
    document_id,
)
from .switcher import QuickSwitcher

__all__ = [
    'DocumentNavigator',
    'DocumentRef',
    'NavigationAction',
    'document_id',
    'QuickSwitcher',
]
