"""Core type definitions for the etymology aggregation system.

Provides immutable domain models with strict typing.
All entities are Pydantic models for validation and serialization.
"""

import math
import uuid
from enum import Enum
from typing import Any, Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class RelationshipType(str, Enum):
    """Closed set of edge types between a query word and a related word.

    Family-specific cognates (``cognate_romance``, ``cognate_germanic``...)
    are also accepted; see ``family_cognate_type``.
    """
    ETYMOLOGY = "etymology"
    COGNATE = "cognate"
    DERIVATIVE = "derivative"
    COMPOUND = "compound"
    BORROWING = "borrowing"
    PIE_DERIVATIVE = "pie_derivative"
    SHORTENED_FROM = "shortened_from"
    SHORTENED_TO = "shortened_to"
    ETYMOLOGICAL_COGNATE = "etymological_cognate"
    RELATED = "related"


FAMILY_COGNATE_PREFIX = "cognate_"

_RELATIONSHIP_VALUES = frozenset(t.value for t in RelationshipType)


def family_cognate_type(family: str) -> str:
    """Relationship type for a cognate produced by a family sound-change rule."""
    return f"{FAMILY_COGNATE_PREFIX}{family}"


def is_relationship_type(value: str) -> bool:
    """True for members of the closed type set, including ``cognate_<family>``."""
    if value in _RELATIONSHIP_VALUES:
        return True
    family = value[len(FAMILY_COGNATE_PREFIX):]
    return (
        value.startswith(FAMILY_COGNATE_PREFIX)
        and bool(family)
        and family.replace("_", "").isalpha()
        and family.islower()
    )


class Priority(str, Enum):
    """Coarse provenance-quality tier."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return {"high": 3, "medium": 2, "low": 1}[self.value]


class SourceTag(str, Enum):
    """Provenance tag for the extractor a connection came from."""
    ETYMONLINE = "etymonline"
    ETYMONLINE_AI = "etymonline-ai"
    WIKTIONARY = "wiktionary"
    COGNATE_RULES = "cognate-rules"
    CROSS_REFERENCE = "cross-reference"
    DICTIONARY = "dictionary-api"

    @property
    def tier(self) -> Priority:
        if self in (SourceTag.ETYMONLINE, SourceTag.ETYMONLINE_AI):
            return Priority.HIGH
        if self is SourceTag.DICTIONARY:
            return Priority.LOW
        return Priority.MEDIUM


def new_word_id() -> str:
    """Opaque, never-reused word identifier."""
    return f"w_{uuid.uuid4().hex}"


def clamp_confidence(value: Any) -> float:
    """Clamp any numeric value into [0, 1]; NaN becomes 0.

    Raises ValueError for anything that is not a number, so model
    validation reports it as a field error.
    """
    try:
        number = float(value)
    except TypeError as e:
        raise ValueError(f"confidence must be a number, got {type(value).__name__}") from e
    if math.isnan(number):
        return 0.0
    return min(1.0, max(0.0, number))


class Word(BaseModel):
    """A word in some language or proto-language.

    ``text`` keeps its case but is compared case-insensitively everywhere.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_word_id)
    text: str
    language: str = "und"
    part_of_speech: Optional[str] = None
    definition: Optional[str] = None


class Relationship(BaseModel):
    """Edge metadata from the implicit query word to a connected word."""
    model_config = ConfigDict(frozen=True)

    type: str = RelationshipType.RELATED.value
    confidence: float = 0.5
    notes: str = ""
    shared_root: Optional[str] = None
    origin: Optional[str] = None
    priority: Priority = Priority.MEDIUM
    source: str = "unknown"

    @field_validator("type", mode="before")
    @classmethod
    def _check_type(cls, value: Any) -> str:
        if isinstance(value, Enum):
            value = value.value
        value = str(value).strip().lower()
        if not is_relationship_type(value):
            raise ValueError(f"unknown relationship type: {value}")
        return value

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp(cls, value: Any) -> float:
        return clamp_confidence(value)

    @field_validator("source", mode="before")
    @classmethod
    def _source_value(cls, value: Any) -> str:
        if isinstance(value, Enum):
            return value.value
        return value


class Connection(BaseModel):
    """Directed edge from an implicit source word to ``word``."""
    model_config = ConfigDict(frozen=True)

    word: Word
    relationship: Relationship

    @classmethod
    def create(
        cls,
        text: str,
        language: str,
        type: str,
        confidence: float,
        source: SourceTag,
        notes: str = "",
        shared_root: Optional[str] = None,
        origin: Optional[str] = None,
        part_of_speech: Optional[str] = None,
    ) -> "Connection":
        """Build a connection stamped with its source's tier."""
        return cls(
            word=Word(text=text, language=language, part_of_speech=part_of_speech),
            relationship=Relationship(
                type=type,
                confidence=confidence,
                notes=notes,
                shared_root=shared_root,
                origin=origin,
                priority=source.tier,
                source=source,
            ),
        )


class EtymologyResult(BaseModel):
    """Outcome of one query."""
    model_config = ConfigDict(frozen=True)

    source_word: Word
    connections: list[Connection] = Field(default_factory=list)


# ═════════════════════════════════════════════════════════════════════════════
# Cross-Reference Index records
# ═════════════════════════════════════════════════════════════════════════════

class IndexEntry(BaseModel):
    """One word seen with a given shared root."""
    model_config = ConfigDict(frozen=True)

    source_word_text: str
    source_language: str = "en"
    etymological_form: str
    etymological_language: str
    relationship_type: str
    confidence: float = Field(ge=0.0, le=1.0)
    shared_root_key: str


class ShortenedFormEntry(BaseModel):
    """``shortened_form`` was seen as a shortening of the keyed word."""
    model_config = ConfigDict(frozen=True)

    shortened_form: str
    language: str
    confidence: float = Field(ge=0.0, le=1.0)


class IndexStats(BaseModel):
    """Size of the Cross-Reference Index."""
    model_config = ConfigDict(frozen=True)

    root_keys: int
    total_entries: int
    source_words: int
    cognate_groups: int
    shortened_keys: int
    largest_clusters: dict[str, int] = Field(default_factory=dict)


class CognateGroup(BaseModel):
    """Other words recorded under a root key the queried word was seen with."""
    model_config = ConfigDict(frozen=True)

    shared_root_key: str
    cognates: list[IndexEntry] = Field(default_factory=list)


# ═════════════════════════════════════════════════════════════════════════════
# Collaborator payloads
# ═════════════════════════════════════════════════════════════════════════════

class LLMCandidate(BaseModel):
    """One pre-extracted tuple from the language-model collaborator.

    Every field is optional because the collaborator's output is untrusted;
    incomplete candidates are dropped during normalization.
    """
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    word: Optional[str] = None
    language: Optional[str] = None
    relationship_type: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "relationship_type", "relationshipType", "relationship", "type"
        ),
    )
    confidence: Optional[float] = None
    notes: str = ""
    shared_root: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("shared_root", "sharedRoot"),
    )

    @field_validator("word", "language", "relationship_type", "shared_root", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        return str(value)

    @field_validator("notes", mode="before")
    @classmethod
    def _notes(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("confidence", mode="before")
    @classmethod
    def _lenient_confidence(cls, value: Any) -> Optional[float]:
        try:
            return None if value is None else float(value)
        except (TypeError, ValueError):
            return None


class DictionaryEntry(BaseModel):
    """What the plain dictionary collaborator knows about a word."""
    model_config = ConfigDict(frozen=True)

    word: str
    origin: Optional[str] = None
    definition: Optional[str] = None
    part_of_speech: Optional[str] = None
    phonetic: Optional[str] = None


class ScrapedPage(BaseModel):
    """Cleaned page markup with the URL it was requested from."""
    model_config = ConfigDict(frozen=True)

    html: str
    url: str


class SourceDocuments(BaseModel):
    """Raw inputs gathered for one query; absent sources are ``None``."""
    model_config = ConfigDict(frozen=True)

    wiki_markup: Optional[str] = None
    page: Optional[ScrapedPage] = None
    dictionary: Optional[DictionaryEntry] = None
    llm_candidates: Optional[Any] = None
