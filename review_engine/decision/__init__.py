"""
Decision Package

Confidence-driven review gating for machine-extracted documents.

Usage:
    from review_engine.decision import ConfidenceGate, ExtractionMetadata, enhance_prompt

    meta = ExtractionMetadata('hybrid', 0.5)
    outcome = ConfidenceGate().evaluate(meta)

    if outcome.requires_review:
        print(outcome.justification)
    prompt = enhance_prompt(base_prompt, meta)
"""

from .confidence_gate import (
    ConfidenceGate,
    ExtractionMetadata,
    ExtractionMethod,
    ReviewRequirement,
    REVIEW_THRESHOLD,
    LOW_CONFIDENCE_WARNING,
    requires_review,
    justification,
    prompt_guidance,
    enhance_prompt,
    confidence_percent,
)

__all__ = [
    'ConfidenceGate',
    'ExtractionMetadata',
    'ExtractionMethod',
    'ReviewRequirement',
    'REVIEW_THRESHOLD',
    'LOW_CONFIDENCE_WARNING',
    'requires_review',
    'justification',
    'prompt_guidance',
    'enhance_prompt',
    'confidence_percent',
]
