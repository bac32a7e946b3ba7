"""Normalization of pre-extracted candidate tuples.

A language-model collaborator reads the cleaned page and returns
``{word, language, relationshipType, confidence, notes, sharedRoot}``
tuples. The output is untrusted: it may be a JSON string, a bare array, or
an object wrapping the array. Everything is funnelled into ``Connection``
here so the merge engine never sees the raw shape.
"""

from typing import Any, Optional

import orjson
from pydantic import ValidationError as PydanticValidationError

from etymos.core.types import (
    Connection,
    LLMCandidate,
    RelationshipType,
    SourceTag,
    is_relationship_type,
)
from etymos.errors import ExtractionError
from etymos.observ import get_logger
from etymos.rules.languages import language_code_from_name, normalize_language_code
from etymos.services.base import SourceExtractor, dedupe_max_confidence

logger = get_logger(__name__)


DEFAULT_CONFIDENCE = 0.7
HIGH_TIER_BOOST = 0.1
BOOST_CAP = 0.95

WRAPPER_KEYS = ("relationships", "words", "connections")

TYPE_SYNONYMS: dict[str, str] = {
    "etymological": RelationshipType.ETYMOLOGY.value,
    "ancestor": RelationshipType.ETYMOLOGY.value,
    "pie root": RelationshipType.ETYMOLOGY.value,
    "related": RelationshipType.COGNATE.value,
    "derived": RelationshipType.DERIVATIVE.value,
    "borrowed": RelationshipType.BORROWING.value,
    "loan": RelationshipType.BORROWING.value,
    "pie derivative": RelationshipType.PIE_DERIVATIVE.value,
}


def normalize_relationship_type(value: Optional[str]) -> str:
    """Map a free-form type label onto the closed set; ``etymology`` if unknown."""
    normalized = (value or "").strip().lower()
    if normalized in TYPE_SYNONYMS:
        return TYPE_SYNONYMS[normalized]
    if is_relationship_type(normalized):
        return normalized
    return RelationshipType.ETYMOLOGY.value


class LLMCandidateNormalizer(SourceExtractor):
    """IExtractor over language-model output (text or decoded JSON)."""

    source = SourceTag.ETYMONLINE_AI

    def _extract(
        self,
        raw_text: Any,
        source_word: str,
        source_language: str,
        **params
    ) -> list[Connection]:
        items = self._items(raw_text)

        candidates = []
        skipped = 0
        for item in items:
            candidate = self._parse_item(item)
            if candidate is None or not candidate.word or not candidate.language:
                skipped += 1
                continue

            word = candidate.word.strip()
            if word.lower() == source_word.lower():
                skipped += 1
                continue

            language = (
                language_code_from_name(candidate.language)
                or normalize_language_code(candidate.language)
            )
            confidence = DEFAULT_CONFIDENCE if candidate.confidence is None else candidate.confidence
            confidence = min(max(confidence, 0.0) + HIGH_TIER_BOOST, BOOST_CAP)

            candidates.append(self._candidate(
                word,
                language,
                normalize_relationship_type(candidate.relationship_type),
                confidence,
                source_word,
                notes=candidate.notes or "Extracted by language model from etymonline",
                shared_root=candidate.shared_root or word,
                origin=f"{candidate.language} {word}"
            ))

        if skipped:
            logger.debug("candidate_dropped", reason="malformed_item", count=skipped, source=self.source.value)

        return dedupe_max_confidence(candidates)

    @staticmethod
    def _items(raw: Any) -> list[Any]:
        if isinstance(raw, (str, bytes)):
            try:
                raw = orjson.loads(raw)
            except orjson.JSONDecodeError as e:
                raise ExtractionError("etymonline-ai", f"invalid JSON: {e}") from e

        if isinstance(raw, dict):
            for key in WRAPPER_KEYS:
                if isinstance(raw.get(key), list):
                    return raw[key]
            first = next((value for value in raw.values() if isinstance(value, list)), None)
            if first is None:
                raise ExtractionError("etymonline-ai", "object contains no array values")
            return first

        if isinstance(raw, (list, tuple)):
            return list(raw)

        raise ExtractionError("etymonline-ai", f"unsupported payload type {type(raw).__name__}")

    @staticmethod
    def _parse_item(item: Any) -> Optional[LLMCandidate]:
        if isinstance(item, LLMCandidate):
            return item
        if not isinstance(item, dict):
            return None
        try:
            return LLMCandidate.model_validate(item)
        except PydanticValidationError:
            return None
