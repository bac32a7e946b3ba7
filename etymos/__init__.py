"""Etymos - etymological connection aggregation.

Extracts candidate "word is related to word" edges from several noisy
sources, cross-references shared roots, and merges everything into one
deduplicated, confidence-ranked list.
"""

__version__ = "0.1.0"

# Observability exports for convenience
from etymos.observ import get_logger, timer, timed
from etymos.errors import (
    EtymosError,
    ErrorCode,
    ValidationError,
    InvalidWordError,
    InvalidLanguageError,
    ProcessingError,
    ExtractionError,
    ServiceError,
    SourceUnavailableError,
    ConfigurationError,
)

__all__ = [
    # Version
    "__version__",
    # Logging
    "get_logger",
    "timer",
    "timed",
    # Errors
    "EtymosError",
    "ErrorCode",
    "ValidationError",
    "InvalidWordError",
    "InvalidLanguageError",
    "ProcessingError",
    "ExtractionError",
    "ServiceError",
    "SourceUnavailableError",
    "ConfigurationError",
]
