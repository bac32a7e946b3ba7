"""Rule-based cognate generation.

Two strategies over static rule tables:

1. Direct lookup: the query word is found in the concept table and every
   other-language form of the same concept becomes a cognate (0.95), unless
   it is merely a derivative of the query word.
2. Sound changes: substitution rules keyed by source/target branch are
   applied to the query word; a changed form longer than one character is
   a low-confidence (0.75) family cognate.
"""

from typing import Any, Iterable, Optional, Sequence

from etymos.core.types import Connection, RelationshipType, SourceTag, family_cognate_type
from etymos.rules.concepts import find_concepts
from etymos.rules.languages import language_branches, language_name
from etymos.rules.morphology import (
    DERIVATIONAL_PREFIXES,
    DERIVATIONAL_SUFFIXES,
    is_affix_variant,
    is_cross_language_derivative,
)
from etymos.rules.sound_changes import rules_for
from etymos.services.base import SourceExtractor, dedupe_max_confidence


DIRECT_CONFIDENCE = 0.95
SOUND_CHANGE_CONFIDENCE = 0.75

DEFAULT_TARGET_LANGUAGES: tuple[str, ...] = ("en", "es", "fr", "de", "it")


class RuleBasedCognateGenerator(SourceExtractor):
    """IExtractor whose raw input is the query word itself."""

    source = SourceTag.COGNATE_RULES

    def _extract(
        self,
        raw_text: Any,
        source_word: str,
        source_language: str,
        target_languages: Optional[Sequence[str]] = None,
        include_sound_changes: bool = True,
        **params
    ) -> list[Connection]:
        word = str(raw_text).strip().lower()
        targets = tuple(target_languages or DEFAULT_TARGET_LANGUAGES)

        candidates = list(self.direct_cognates(word, source_language, targets))
        if include_sound_changes:
            candidates.extend(self.sound_change_cognates(word, source_language, targets))

        unique = dedupe_max_confidence(candidates)
        return sorted(unique, key=lambda c: -c.relationship.confidence)

    def direct_cognates(
        self,
        word: str,
        source_language: str,
        target_languages: Iterable[str]
    ) -> Iterable[Optional[Connection]]:
        targets = [t for t in target_languages if t != source_language]

        for match in find_concepts(word, source_language):
            for target in targets:
                for form in match.forms.get(target, ()):
                    if is_derivative(word, form, source_language, target):
                        continue
                    yield self._candidate(
                        form,
                        target,
                        RelationshipType.COGNATE.value,
                        DIRECT_CONFIDENCE,
                        word,
                        notes=f"Direct cognate through {match.concept} concept",
                        shared_root=match.concept,
                        origin=f"{match.concept} ({match.field})"
                    )

    def sound_change_cognates(
        self,
        word: str,
        source_language: str,
        target_languages: Iterable[str]
    ) -> Iterable[Optional[Connection]]:
        source_branches = language_branches(source_language)

        for target in target_languages:
            if target == source_language:
                continue

            target_branches = language_branches(target)
            for source_branch in source_branches:
                for target_branch in target_branches:
                    for rule in rules_for(source_branch, target_branch):
                        if not rule.applies_to(target, target_branches):
                            continue

                        transformed = rule.apply(word)
                        if transformed == word or len(transformed) <= 1:
                            continue

                        yield self._candidate(
                            transformed,
                            target,
                            family_cognate_type(target_branches[0]),
                            SOUND_CHANGE_CONFIDENCE,
                            word,
                            notes=f"Potential cognate via sound change: {rule.example}",
                            origin=f"{language_name(target)} {transformed}"
                        )


def is_derivative(source: str, target: str, source_language: str, target_language: str) -> bool:
    """Same word, a same-language affixed form, or a cross-language derivative."""
    source = source.strip().lower()
    target = target.strip().lower()

    if source == target:
        return True
    if source_language != target_language:
        return is_cross_language_derivative(source, target, source_language, target_language)

    return is_affix_variant(source, target, DERIVATIONAL_SUFFIXES, DERIVATIONAL_PREFIXES)
