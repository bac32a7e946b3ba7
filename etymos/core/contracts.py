"""Service contracts and interfaces.

Defines protocols for dependency injection and testing.
"""

from typing import Any, Optional, Protocol, TypeVar
from .types import Connection, DictionaryEntry, ScrapedPage


T = TypeVar('T')


class IExtractor(Protocol):
    """Contract shared by every Source Extractor.

    Implementations never raise on malformed input: they log and return an
    empty list.
    """

    def extract(
        self,
        raw_text: Optional[str],
        source_word: str,
        source_language: str,
        **params
    ) -> list[Connection]:
        """Turn one source's raw text into candidate connections."""
        ...


class ICleaner(Protocol):
    """Contract for data cleaning operations.

    Cleaners are pure, composable transformation functions.
    """

    @property
    def name(self) -> str:
        """Cleaner identifier."""
        ...

    @property
    def version(self) -> str:
        """Cleaner version."""
        ...

    def clean(self, value: T, **params) -> T:
        """Apply cleaning transformation.

        Must be idempotent and side-effect free.
        """
        ...

    def validate(self, value: T) -> bool:
        """Check if value passes validation."""
        ...


class IValidator(Protocol):
    """Contract for data validation."""

    def validate(self, data: object, *args) -> tuple[bool, list[str]]:
        """Validate data, returning success and error messages."""
        ...


# ═════════════════════════════════════════════════════════════════════════════
# Collaborators (fetch boundary)
# ═════════════════════════════════════════════════════════════════════════════

class IWikiSource(Protocol):
    """Delivers raw wiki markup for a word."""

    async def fetch_markup(self, word: str) -> Optional[str]:
        ...


class IScrapeSource(Protocol):
    """Delivers a cleaned dictionary-style page for a word."""

    async def fetch_page(self, word: str) -> Optional[ScrapedPage]:
        ...


class IDictionarySource(Protocol):
    """Delivers a plain dictionary record, including its origin sentence."""

    async def fetch_entry(self, word: str, language: str) -> Optional[DictionaryEntry]:
        ...


class ICandidateSource(Protocol):
    """Extracts candidate tuples from a cleaned page (e.g. a language model)."""

    async def extract_candidates(
        self,
        page: ScrapedPage,
        word: str,
        language: str
    ) -> Any:
        """Return candidate tuples, raw JSON text, or decoded JSON."""
        ...
