"""Plain origin-sentence extractor.

Parses the one-line ``origin`` text a simple dictionary API returns
("from Old English wæter, related to Dutch water") into low-confidence
ancestor and cognate connections.
"""

import re
from typing import Any

from etymos.core.types import Connection, DictionaryEntry, RelationshipType, SourceTag
from etymos.rules.languages import LANGUAGE_NAME_PATTERN, language_code_from_name
from etymos.services.base import SourceExtractor, dedupe_max_confidence


ORIGIN_CONFIDENCE = 0.6

_WORD = r"[\"'‘“]?(\*?[A-Za-zÀ-ɏͰ-ϿЀ-ӿ-]+)[\"'’”]?"

ORIGIN_PATTERNS: tuple[tuple[RelationshipType, re.Pattern], ...] = (
    # "ancestor" in dictionary prose is an etymology edge
    (
        RelationshipType.ETYMOLOGY,
        re.compile(
            rf"\b(?:from|borrowed from|via)\s+({LANGUAGE_NAME_PATTERN})\s+(?:the\s+)?(?:word\s+)?{_WORD}",
            re.IGNORECASE
        )
    ),
    (
        RelationshipType.COGNATE,
        re.compile(
            rf"\brelated to\s+({LANGUAGE_NAME_PATTERN})\s+(?:the\s+)?(?:word\s+)?{_WORD}",
            re.IGNORECASE
        )
    ),
)


class PlainOriginExtractor(SourceExtractor):
    """IExtractor over a dictionary origin sentence."""

    source = SourceTag.DICTIONARY

    def _extract(
        self,
        raw_text: Any,
        source_word: str,
        source_language: str,
        **params
    ) -> list[Connection]:
        if isinstance(raw_text, DictionaryEntry):
            raw_text = raw_text.origin or ""

        text = re.sub(r"\s+", " ", str(raw_text)).strip()

        candidates = []
        for relationship, pattern in ORIGIN_PATTERNS:
            for match in pattern.finditer(text):
                name = match.group(1).strip()
                word = match.group(2)
                if not word.startswith("*"):
                    word = word.strip("-")
                language = language_code_from_name(name)
                if not language:
                    continue

                label = f"{name} {word}"
                candidates.append(self._candidate(
                    word,
                    language,
                    relationship.value,
                    ORIGIN_CONFIDENCE,
                    source_word,
                    notes=f"Derived from {label}",
                    shared_root=label,
                    origin=label
                ))

        return dedupe_max_confidence(candidates)
