"""Multi-source merge and deduplication.

Combines every extractor's candidates for one query with the cross
references the index reveals, then filters, validates, deduplicates and
orders them. Pure apart from index reads; never raises.
"""

from typing import Any, Mapping, Optional, Sequence, Union

from pydantic import ValidationError as PydanticValidationError

from etymos.core.types import Connection, RelationshipType, SourceTag, Word
from etymos.observ import get_logger
from etymos.rules.languages import PIE, normalize_language_code
from etymos.rules.morphology import is_affix_variant, is_cross_language_derivative
from etymos.services.crossref import CrossReferenceResolver
from etymos.storage.index import CrossReferenceIndex
from etymos.storage.validators import LexicalValidator, ValidatorFactory

logger = get_logger(__name__)


TYPE_PRIORITY: dict[str, int] = {
    RelationshipType.ETYMOLOGY.value: 3,
    RelationshipType.COGNATE.value: 2,
    "ancestor": 2,
    RelationshipType.BORROWING.value: 1,
    RelationshipType.RELATED.value: 0,
}


def source_order(tag: SourceTag) -> tuple[int, str]:
    """Fixed processing order: highest tier first, then tag name."""
    return (-tag.tier.rank, tag.value)


def priority_score(connection: Connection) -> int:
    """Source tier (3/2/1) plus relationship-type priority (3..0)."""
    relationship = connection.relationship
    return relationship.priority.rank + TYPE_PRIORITY.get(relationship.type, 0)


def sort_key(connection: Connection) -> tuple:
    return (
        -connection.relationship.priority.rank,
        -connection.relationship.confidence,
        connection.word.text.lower(),
        connection.word.language,
    )


class MergeEngine:
    """Merge(candidatesBySource, sourceWord) -> ordered connections."""

    def __init__(
        self,
        index: Optional[CrossReferenceIndex] = None,
        lexicon: Optional[LexicalValidator] = None,
        resolver: Optional[CrossReferenceResolver] = None
    ):
        self._lexicon = lexicon or LexicalValidator()
        self._validator = ValidatorFactory.merge_validator(self._lexicon)
        if resolver is None and index is not None:
            resolver = CrossReferenceResolver(index, self._lexicon)
        self._resolver = resolver

    def merge(
        self,
        candidates_by_source: Mapping[Union[SourceTag, str], Sequence[Any]],
        source_word: Word
    ) -> list[Connection]:
        """Merge per-source candidate lists into one deduplicated, ordered list."""
        try:
            return self._merge(candidates_by_source, source_word)
        except Exception as e:
            logger.warning("merge_failed", word=source_word.text, error=str(e), error_type=type(e).__name__)
            return []

    def _merge(
        self,
        candidates_by_source: Mapping[Union[SourceTag, str], Sequence[Any]],
        source_word: Word
    ) -> list[Connection]:
        stamped = self._stamp(candidates_by_source)

        if self._resolver is not None:
            stamped.extend(self._resolver.resolve(stamped, source_word))

        survivors = []
        for connection in stamped:
            if self.is_trivial_derivative(source_word, connection):
                logger.debug("candidate_dropped", reason="trivial_derivative", text=connection.word.text)
                continue

            is_valid, errors = self._validator.validate(connection, source_word)
            if not is_valid:
                logger.debug("candidate_dropped", reason="validation", text=connection.word.text, errors=errors)
                continue

            survivors.append(self._normalize_language(connection))

        own_language = normalize_language_code(source_word.language)
        own_text = source_word.text.strip().lower()

        best: dict[tuple[str, str], Connection] = {}
        for connection in survivors:
            key = (connection.word.text.strip().lower(), connection.word.language)
            if key == (own_text, own_language):
                logger.debug("candidate_dropped", reason="self_loop", text=connection.word.text)
                continue

            current = best.get(key)
            if current is None or self._outranks(connection, current):
                best[key] = connection

        merged = sorted(best.values(), key=sort_key)
        logger.debug("candidates_merged", word=source_word.text, received=len(stamped), kept=len(merged))
        return merged

    # ─────────────────────────────────────────────────────────────────────────
    # Steps
    # ─────────────────────────────────────────────────────────────────────────

    def _stamp(
        self,
        candidates_by_source: Mapping[Union[SourceTag, str], Sequence[Any]]
    ) -> list[Connection]:
        sources = []
        for source, candidates in candidates_by_source.items():
            try:
                sources.append((SourceTag(source), candidates or ()))
            except ValueError:
                logger.warning("unknown_source_dropped", source=str(source), count=len(candidates or ()))

        stamped = []
        for tag, candidates in sorted(sources, key=lambda pair: source_order(pair[0])):
            for candidate in candidates:
                connection = self._coerce(candidate, tag)
                if connection is not None:
                    stamped.append(connection)
        return stamped

    @staticmethod
    def _coerce(candidate: Any, tag: SourceTag) -> Optional[Connection]:
        if not isinstance(candidate, Connection):
            try:
                candidate = Connection.model_validate(candidate)
            except PydanticValidationError:
                logger.debug("candidate_dropped", reason="malformed", source=tag.value)
                return None

        if not candidate.word.text.strip():
            logger.debug("candidate_dropped", reason="missing_text", source=tag.value)
            return None
        if not candidate.word.language.strip():
            logger.debug("candidate_dropped", reason="missing_language", source=tag.value)
            return None

        return candidate.model_copy(update={
            "relationship": candidate.relationship.model_copy(update={
                "priority": tag.tier,
                "source": tag.value,
            })
        })

    def is_trivial_derivative(self, source_word: Word, connection: Connection) -> bool:
        """Same-language inflection of the query word, or a shared-root cross-language form."""
        source = source_word.text.strip().lower()
        target = connection.word.text.strip().lower()
        if source == target:
            return True

        source_language = normalize_language_code(source_word.language)
        target_language = normalize_language_code(connection.word.language)

        if source_language == target_language:
            return is_affix_variant(
                source,
                target,
                self._lexicon.policy.trivial_suffixes,
                self._lexicon.policy.negative_prefixes
            )

        return is_cross_language_derivative(source, target, source_language, target_language)

    @staticmethod
    def _normalize_language(connection: Connection) -> Connection:
        word = connection.word
        language = PIE if word.text.strip().startswith("*") else normalize_language_code(word.language)
        if language == word.language:
            return connection
        return connection.model_copy(update={"word": word.model_copy(update={"language": language})})

    @staticmethod
    def _outranks(challenger: Connection, current: Connection) -> bool:
        challenger_score, current_score = priority_score(challenger), priority_score(current)
        if challenger_score != current_score:
            return challenger_score > current_score
        return challenger.relationship.confidence > current.relationship.confidence
