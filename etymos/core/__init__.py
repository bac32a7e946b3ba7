"""Core domain models and types.

Barrel export for clean imports across the application.
"""

from .types import (
    RelationshipType,
    Priority,
    SourceTag,
    Word,
    Relationship,
    Connection,
    EtymologyResult,
    IndexEntry,
    ShortenedFormEntry,
    IndexStats,
    CognateGroup,
    LLMCandidate,
    DictionaryEntry,
    ScrapedPage,
    SourceDocuments,
    family_cognate_type,
    is_relationship_type,
    clamp_confidence,
)

__all__ = [
    "RelationshipType",
    "Priority",
    "SourceTag",
    "Word",
    "Relationship",
    "Connection",
    "EtymologyResult",
    "IndexEntry",
    "ShortenedFormEntry",
    "IndexStats",
    "CognateGroup",
    "LLMCandidate",
    "DictionaryEntry",
    "ScrapedPage",
    "SourceDocuments",
    "family_cognate_type",
    "is_relationship_type",
    "clamp_confidence",
]
