"""
Engine Configuration

Tunables for the review engine, loaded from YAML and validated with
Pydantic.

Example engine.yaml:
    engine:
      autosave_delay: 2.0
      saved_reset_delay: 2.0
      review_threshold: 0.7
      retry_dropped_saves: false
      metadata_policy: reject
"""

from pathlib import Path
from typing import Any, Literal, Optional, Union

import yaml
from loguru import logger
from pydantic import BaseModel, ValidationError, field_validator

from .decision.confidence_gate import ExtractionMetadata, REVIEW_THRESHOLD
from .errors import ConfigError


class EngineConfig(BaseModel):
    """Validated engine settings."""
    autosave_delay: float = 2.0
    saved_reset_delay: float = 2.0
    review_threshold: float = REVIEW_THRESHOLD
    retry_dropped_saves: bool = False
    metadata_policy: Literal['reject', 'clamp'] = 'reject'

    @field_validator('autosave_delay', 'saved_reset_delay')
    @classmethod
    def validate_delay(cls, v):
        """Delays are seconds and cannot be negative."""
        if v < 0:
            raise ValueError('Delay cannot be negative')
        return v

    @field_validator('review_threshold')
    @classmethod
    def validate_threshold(cls, v):
        if not 0.0 <= v <= 1.0:
            raise ValueError('Review threshold must be within [0, 1]')
        return v

    def parse_metadata(self, data: dict) -> ExtractionMetadata:
        """Read a metadata record according to the configured policy."""
        return ExtractionMetadata.from_dict(data, clamp=self.metadata_policy == 'clamp')


def load_config(config_path: Optional[Union[str, Path]] = None) -> EngineConfig:
    """
    Load engine configuration from a YAML file.

    Args:
        config_path: Path to YAML file; None returns the defaults

    Returns:
        Validated EngineConfig

    Raises:
        ConfigError: File missing, unreadable, or invalid
    """
    if config_path is None:
        return EngineConfig()

    config_path = Path(config_path)
    logger.info(f"Loading configuration from: {config_path}")

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            raw: Any = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read config {config_path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"Config {config_path} must be a mapping")

    section = raw.get('engine', raw)

    try:
        return EngineConfig(**section)
    except (ValidationError, TypeError) as e:
        raise ConfigError(f"Invalid config {config_path}: {e}") from e
