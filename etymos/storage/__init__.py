"""Storage layer: cleaning, validation and the cross-reference index.

Barrel export for cleaners, validators and the index.
"""

from .cleaners import (
    HTMLCleaner,
    TextNormalizer,
    FormCleaner,
    LanguageCodeCleaner,
    RootKeyNormalizer,
    normalize_root_key,
)
from .validators import LexicalValidator, ConnectionValidator, ValidatorFactory
from .index import CrossReferenceIndex

__all__ = [
    # Cleaners
    "HTMLCleaner",
    "TextNormalizer",
    "FormCleaner",
    "LanguageCodeCleaner",
    "RootKeyNormalizer",
    "normalize_root_key",
    # Validators
    "LexicalValidator",
    "ConnectionValidator",
    "ValidatorFactory",
    # Index
    "CrossReferenceIndex",
]
