"""
Confidence Gate

Decides whether machine-extracted data needs a human to look at it, and
which OCR caveats to add to extraction prompts.

Decision rule:
- Text-layer extractions are never flagged; the PDF text layer is the
  source of truth regardless of the reported confidence
- OCR and hybrid extractions are flagged when confidence < 0.7

Prompt guidance:
OCR output has characteristic misreads (0/O, 1/l/I, rn/m, comma/period).
Extraction prompts for OCR or hybrid text get an instruction block that
names these confusions and how to sanity-check currency, percentage,
date and code fields. The block is appended after the caller's base
prompt; the base prompt itself is never changed.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from loguru import logger

from ..errors import InvalidMetadataError

REVIEW_THRESHOLD = 0.7


class ExtractionMethod(Enum):
    """How the text of a document was obtained."""

    TEXT = 'text'        # PDF text layer
    OCR = 'ocr'          # Optical character recognition on page images
    HYBRID = 'hybrid'    # Text layer for some pages, OCR for others

    @property
    def display_name(self) -> str:
        names = {
            ExtractionMethod.TEXT: "Text layer",
            ExtractionMethod.OCR: "OCR",
            ExtractionMethod.HYBRID: "Hybrid (text + OCR)",
        }
        return names[self]

    @classmethod
    def parse(cls, value: Union[str, 'ExtractionMethod']) -> 'ExtractionMethod':
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidMetadataError(
                f"Unknown extraction method: {value!r}", field_name='extraction_method'
            ) from None


def _check_confidence(confidence: Any) -> float:
    if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
        raise InvalidMetadataError(
            f"Confidence must be a number, got {confidence!r}", field_name='confidence'
        )
    if not math.isfinite(confidence):
        raise InvalidMetadataError(
            f"Confidence must be finite, got {confidence!r}", field_name='confidence'
        )
    return float(confidence)


@dataclass(frozen=True)
class ExtractionMetadata:
    """
    How a document's text was extracted and how reliable it is.

    Confidence outside [0, 1] is rejected with InvalidMetadataError. Use
    `clamped()` to pull out-of-range scores into range instead.
    """
    extraction_method: ExtractionMethod
    confidence: float

    def __post_init__(self):
        object.__setattr__(self, 'extraction_method', ExtractionMethod.parse(self.extraction_method))
        confidence = _check_confidence(self.confidence)
        if not 0.0 <= confidence <= 1.0:
            raise InvalidMetadataError(
                f"Confidence must be within [0, 1], got {confidence}", field_name='confidence'
            )
        object.__setattr__(self, 'confidence', confidence)

    @classmethod
    def clamped(
        cls,
        extraction_method: Union[str, ExtractionMethod],
        confidence: Any,
    ) -> 'ExtractionMetadata':
        """Build metadata, clamping an out-of-range confidence into [0, 1]."""
        value = _check_confidence(confidence)
        bounded = min(1.0, max(0.0, value))
        if bounded != value:
            logger.warning(f"Confidence {value} outside [0, 1] - clamped to {bounded}")
        return cls(extraction_method, bounded)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], clamp: bool = False) -> 'ExtractionMetadata':
        """
        Build from a record such as {'extractionMethod': 'ocr', 'confidence': 0.8}.

        Args:
            data: Mapping with extraction_method/extractionMethod and confidence
            clamp: Clamp out-of-range confidence instead of rejecting it
        """
        method = data.get('extraction_method', data.get('extractionMethod'))
        if method is None:
            raise InvalidMetadataError("Missing extraction method", field_name='extraction_method')
        if 'confidence' not in data:
            raise InvalidMetadataError("Missing confidence", field_name='confidence')

        if clamp:
            return cls.clamped(method, data['confidence'])
        return cls(method, data['confidence'])

    @property
    def confidence_percent(self) -> int:
        """Confidence as a whole percentage, rounded half up."""
        return confidence_percent(self.confidence)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'extraction_method': self.extraction_method.value,
            'confidence': round(self.confidence, 3),
        }


def confidence_percent(confidence: float) -> int:
    """0.655 -> 66, 0.65 -> 65."""
    scaled = Decimal(repr(confidence)) * 100
    return int(scaled.quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def requires_review(meta: ExtractionMetadata, threshold: float = REVIEW_THRESHOLD) -> bool:
    """
    Determine if extracted data requires manual review.

    Args:
        meta: Extraction metadata
        threshold: Confidence below which OCR/hybrid output is flagged

    Returns:
        True for OCR or hybrid extraction with confidence below threshold
    """
    return meta.extraction_method != ExtractionMethod.TEXT and meta.confidence < threshold


def justification(meta: ExtractionMetadata, threshold: float = REVIEW_THRESHOLD) -> Optional[str]:
    """Reviewer-facing reason for a review flag, or None when not flagged."""
    if not requires_review(meta, threshold):
        return None

    percent = meta.confidence_percent

    if meta.extraction_method == ExtractionMethod.OCR:
        return (
            f"Document was scanned/image-based. OCR confidence is {percent}%. "
            "Please verify extracted values."
        )

    return (
        f"Mixed text and OCR extraction with {percent}% confidence. "
        "Please review for accuracy."
    )


LOW_CONFIDENCE_WARNING = (
    "⚠️ CONFIDENCE IS LOW (<70%) - Exercise extra caution and flag uncertain "
    "fields for review."
)

_GUIDANCE_TEMPLATE = """\
**IMPORTANT - OCR EXTRACTION NOTICE:**
This text was extracted via OCR (Optical Character Recognition) with {percent}% confidence.
Some characters may be misread. Common OCR errors to account for:
- Digits vs Letters: 0↔O, 1↔l↔I, 5↔S, 8↔B, 6↔G
- Similar shapes: rn↔m, cl↔d, vv↔w
- Punctuation: ,↔. (comma vs period)

**OCR Handling Instructions:**
- Use context clues to infer correct values when characters are ambiguous
- For dollar amounts: verify digits make sense in context (e.g., $1OO,OOO should be $100,000)
- For percentages: ensure values are reasonable (e.g., 5% not S%)
- For dates: validate format and check if dates are logical
- For product codes/NDCs: verify digit patterns match expected formats
- If a field value seems nonsensical, flag it in ambiguousFields array
"""


def prompt_guidance(meta: ExtractionMetadata) -> str:
    """
    OCR instruction block for extraction prompts.

    Returns:
        Empty string for text-layer extractions, otherwise the notice
        block, ending with a low-confidence warning when confidence < 0.7
    """
    if meta.extraction_method == ExtractionMethod.TEXT:
        return ''

    guidance = _GUIDANCE_TEMPLATE.format(percent=meta.confidence_percent)

    if meta.confidence < REVIEW_THRESHOLD:
        guidance += '\n' + LOW_CONFIDENCE_WARNING + '\n'

    return guidance


def enhance_prompt(base_prompt: str, meta: ExtractionMetadata) -> str:
    """Return the base prompt followed by OCR guidance, if any applies."""
    guidance = prompt_guidance(meta)
    if not guidance:
        return base_prompt
    return f"{base_prompt}\n\n{guidance}"


@dataclass(frozen=True)
class ReviewRequirement:
    """Outcome of gating one document's extraction."""
    extraction_method: ExtractionMethod
    confidence_percent: int
    requires_review: bool
    justification: Optional[str]
    guidance: str

    @property
    def display_name(self) -> str:
        return "⚠ Review Required" if self.requires_review else "✓ Accepted"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'extraction_method': self.extraction_method.value,
            'confidence_percent': self.confidence_percent,
            'requires_review': self.requires_review,
            'justification': self.justification,
            'guidance': self.guidance,
        }


class ConfidenceGate:
    """
    Applies the review rule with a configurable threshold.

    Usage:
        gate = ConfidenceGate()
        outcome = gate.evaluate(ExtractionMetadata('ocr', 0.65))
        if outcome.requires_review:
            print(outcome.justification)
    """

    def __init__(self, threshold: float = REVIEW_THRESHOLD):
        if not 0.0 <= threshold <= 1.0:
            raise ValueError(f"Review threshold must be within [0, 1], got {threshold}")
        self.threshold = threshold

    def requires_review(self, meta: ExtractionMetadata) -> bool:
        return requires_review(meta, self.threshold)

    def justification(self, meta: ExtractionMetadata) -> Optional[str]:
        return justification(meta, self.threshold)

    def evaluate(self, meta: ExtractionMetadata) -> ReviewRequirement:
        """Full decision for one extraction."""
        flagged = self.requires_review(meta)
        if flagged:
            logger.debug(
                f"{meta.extraction_method.value} extraction at "
                f"{meta.confidence_percent}% flagged for review"
            )
        return ReviewRequirement(
            extraction_method=meta.extraction_method,
            confidence_percent=meta.confidence_percent,
            requires_review=flagged,
            justification=self.justification(meta),
            guidance=prompt_guidance(meta),
        )

    def evaluate_many(self, metas: Iterable[ExtractionMetadata]) -> List[ReviewRequirement]:
        return [self.evaluate(meta) for meta in metas]
