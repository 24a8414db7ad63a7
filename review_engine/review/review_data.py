"""
Review Data Structures

Data classes for the fields an operator validates during a review
session.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Dict, Iterable, List, Optional


class ReviewStatus(Enum):
    """Status of a review field."""

    PENDING = auto()      # Not yet reviewed
    APPROVED = auto()     # Approved as-is
    REJECTED = auto()     # Rejected as wrong
    FLAGGED = auto()      # Flagged for a second look
    CORRECTED = auto()    # Value corrected by reviewer

    @property
    def is_complete(self) -> bool:
        """Whether review is complete."""
        return self in (ReviewStatus.APPROVED, ReviewStatus.REJECTED, ReviewStatus.CORRECTED)


@dataclass
class ReviewField:
    """
    An extracted field awaiting or having received review.
    """
    field_id: str
    field_name: str
    value: Any
    document_id: Optional[str] = None
    corrected_value: Optional[Any] = None
    confidence: float = 0.0
    source_page: Optional[int] = None
    status: ReviewStatus = ReviewStatus.PENDING
    reviewer_notes: str = ''

    @property
    def final_value(self) -> Any:
        """Get final value (corrected if available, else extracted)."""
        if self.corrected_value is not None:
            return self.corrected_value
        return self.value

    @property
    def is_pending(self) -> bool:
        return self.status == ReviewStatus.PENDING

    def approve(self) -> None:
        """Mark field as approved."""
        self.status = ReviewStatus.APPROVED

    def reject(self, reason: str = '') -> None:
        """Reject the extracted value."""
        self.status = ReviewStatus.REJECTED
        self.reviewer_notes = reason

    def flag(self, note: str = '') -> None:
        """Flag for a second look."""
        self.status = ReviewStatus.FLAGGED
        if note:
            self.reviewer_notes = note

    def correct(self, new_value: Any, notes: str = '') -> None:
        """Correct the extracted value."""
        self.corrected_value = new_value
        self.status = ReviewStatus.CORRECTED
        self.reviewer_notes = notes

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'field_id': self.field_id,
            'field_name': self.field_name,
            'value': self.value,
            'document_id': self.document_id,
            'corrected_value': self.corrected_value,
            'confidence': round(self.confidence, 3),
            'source_page': self.source_page,
            'status': self.status.name,
            'reviewer_notes': self.reviewer_notes,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ReviewField':
        """Create from dictionary."""
        return cls(
            field_id=data['field_id'],
            field_name=data['field_name'],
            value=data.get('value'),
            document_id=data.get('document_id'),
            corrected_value=data.get('corrected_value'),
            confidence=data.get('confidence', 0.0),
            source_page=data.get('source_page'),
            status=ReviewStatus[data.get('status', 'PENDING')],
            reviewer_notes=data.get('reviewer_notes', ''),
        )


@dataclass
class ReviewProgress:
    """Counts shown by the progress tracker."""
    total: int = 0
    approved: int = 0
    rejected: int = 0
    flagged: int = 0
    corrected: int = 0
    pending: int = 0

    @property
    def completed(self) -> int:
        return self.approved + self.rejected + self.corrected

    @property
    def progress(self) -> float:
        """Review completion percentage."""
        if self.total == 0:
            return 1.0
        return self.completed / self.total

    @classmethod
    def from_fields(cls, fields: Iterable[ReviewField]) -> 'ReviewProgress':
        counts = cls()
        for f in fields:
            counts.total += 1
            if f.status == ReviewStatus.APPROVED:
                counts.approved += 1
            elif f.status == ReviewStatus.REJECTED:
                counts.rejected += 1
            elif f.status == ReviewStatus.FLAGGED:
                counts.flagged += 1
            elif f.status == ReviewStatus.CORRECTED:
                counts.corrected += 1
            else:
                counts.pending += 1
        return counts

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total': self.total,
            'approved': self.approved,
            'rejected': self.rejected,
            'flagged': self.flagged,
            'corrected': self.corrected,
            'pending': self.pending,
            'progress': round(self.progress, 2),
        }


def snapshot_fields(fields: Iterable[ReviewField]) -> List[Dict[str, Any]]:
    """Plain-data snapshot of fields, as handed to the auto-saver."""
    return [f.to_dict() for f in fields]
