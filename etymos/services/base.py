"""Shared scaffolding for the Source Extractors.

Every extractor honours the same contract: malformed input yields an empty
list, never an exception. Subclasses implement ``_extract`` and build their
candidates through ``_candidate`` so that form cleaning and the
plausible-form check are applied uniformly.
"""

from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional

from etymos.core.types import Connection, SourceTag
from etymos.observ import get_logger
from etymos.storage.cleaners import FormCleaner
from etymos.storage.validators import LexicalValidator

logger = get_logger(__name__)


class SourceExtractor(ABC):
    """Template for ``IExtractor`` implementations."""

    source: SourceTag

    def __init__(self, lexicon: Optional[LexicalValidator] = None):
        self._lexicon = lexicon or LexicalValidator()
        self._forms = FormCleaner()

    @property
    def lexicon(self) -> LexicalValidator:
        return self._lexicon

    def extract(
        self,
        raw_text: Any,
        source_word: str,
        source_language: str = "en",
        **params
    ) -> list[Connection]:
        """Extract candidates; absent input and parse failures yield ``[]``."""
        if raw_text is None or (isinstance(raw_text, str) and not raw_text.strip()):
            logger.debug("source_empty", source=self.source.value, word=source_word)
            return []

        try:
            connections = self._extract(raw_text, source_word.strip(), source_language, **params)
        except Exception as e:
            logger.warning(
                "extraction_failed",
                source=self.source.value,
                word=source_word,
                error=str(e),
                error_type=type(e).__name__
            )
            return []

        logger.debug(
            "candidates_extracted",
            source=self.source.value,
            word=source_word,
            count=len(connections)
        )
        return connections

    @abstractmethod
    def _extract(
        self,
        raw_text: Any,
        source_word: str,
        source_language: str,
        **params
    ) -> list[Connection]:
        ...

    def _candidate(
        self,
        text: str,
        language: str,
        type: str,
        confidence: float,
        source_word: str,
        **fields
    ) -> Optional[Connection]:
        """Clean ``text`` and build a connection, or None if implausible."""
        form = self._forms.clean(text)

        if not self._forms.validate(form):
            logger.debug("candidate_dropped", reason="unparseable", text=text, source=self.source.value)
            return None

        if not self._lexicon.is_plausible_form(form, source_word):
            logger.debug("candidate_dropped", reason="implausible_form", text=form, source=self.source.value)
            return None

        return Connection.create(form, language, type, confidence, self.source, **fields)


def dedupe_max_confidence(connections: Iterable[Optional[Connection]]) -> list[Connection]:
    """Keep the most confident connection per ``(lowercased text, language)``.

    First-seen order is preserved; None placeholders are skipped.
    """
    best: dict[tuple[str, str], Connection] = {}

    for connection in connections:
        if connection is None:
            continue
        key = (connection.word.text.lower(), connection.word.language)
        current = best.get(key)
        if current is None or connection.relationship.confidence > current.relationship.confidence:
            best[key] = connection

    return list(best.values())
