"""
Engine Errors

Exception hierarchy shared by the review engine packages.
"""


class ReviewEngineError(Exception):
    """Base class for all review engine errors."""
    pass


class InvalidMetadataError(ReviewEngineError, ValueError):
    """
    Extraction metadata violates its contract.
    
    Raised when a confidence score is not a finite number in [0, 1] or
    the extraction method is not one of text/ocr/hybrid.
    """
    
    def __init__(self, message: str, field_name: str = ''):
        super().__init__(message)
        self.field_name = field_name


class ConfigError(ReviewEngineError):
    """Engine configuration could not be loaded or failed validation."""
    pass
