"""Lexical validation rules and quality checks.

``LexicalValidator`` holds the four predicates every extractor and the merge
engine consult. The rule objects below compose them into the merge-time
validator, following the same functional pattern: each rule is a frozen,
callable dataclass returning ``(is_valid, error_message)``.
"""

from typing import Optional, Protocol
from dataclasses import dataclass, field

from etymos.core.types import Connection, RelationshipType, Word
from etymos.rules.languages import is_proto_form, is_proto_language, language_family
from etymos.rules.morphology import is_affix_variant
from etymos.rules.policy import ValidationPolicy


ALWAYS_COMPATIBLE_TYPES = frozenset({
    RelationshipType.ETYMOLOGY.value,
    RelationshipType.BORROWING.value,
    "loan",
})


@dataclass(frozen=True)
class LexicalValidator:
    """Pure predicates deciding whether an extracted token is usable."""

    policy: ValidationPolicy = field(default_factory=ValidationPolicy)

    def is_plausible_form(self, candidate: Optional[str], source_word: str) -> bool:
        """Reject short tokens, stopwords, modern coinages and inflections."""
        text = (candidate or "").strip()
        if len(text) < self.policy.min_form_length:
            return False
        if not any(ch.isalpha() for ch in text):
            return False

        lowered = text.lower()
        if lowered == source_word.strip().lower():
            return False
        if lowered in self.policy.stopwords:
            return False
        if text.startswith("*"):
            return True
        if self._is_modern_coinage(lowered):
            return False
        if self.is_morphological_component(text, source_word):
            return False

        return True

    def is_morphological_component(self, candidate: str, source_word: str) -> bool:
        """True for bare affixes and for the source word plus or minus an affix."""
        text = candidate.strip().lower()
        source = source_word.strip().lower()
        if not text or not source or text.startswith("*"):
            return False

        if text.startswith("-") or text.endswith("-"):
            bare = text.strip("-")
            affixes = set(self.policy.trivial_suffixes) | set(self.policy.negative_prefixes)
            if bare in affixes:
                return True
            if bare and (source.startswith(bare) or source.endswith(bare)):
                return True

        return is_affix_variant(
            text,
            source,
            self.policy.trivial_suffixes,
            self.policy.negative_prefixes
        )

    def is_semantically_suspicious(
        self,
        word_a: str,
        word_b: str,
        language_a: Optional[str] = None,
        language_b: Optional[str] = None
    ) -> bool:
        """True for pairs from mutually exclusive categories or known bad pairs.

        Reconstructed forms on either side are always exempt.
        """
        if is_proto_form(word_a, language_a) or is_proto_form(word_b, language_b):
            return False
        if "proto" in word_a.lower() or "proto" in word_b.lower():
            return False

        if self.policy.is_suspicious_pair(word_a, word_b):
            return True

        for category_a in self.policy.categories_of(word_a):
            for category_b in self.policy.categories_of(word_b):
                if category_a != category_b and self.policy.are_exclusive(category_a, category_b):
                    return True

        return False

    def is_language_compatible(
        self,
        language_a: str,
        language_b: str,
        relationship_type: str
    ) -> bool:
        """Same family group, unless proto-language or an etymology/borrowing edge."""
        if is_proto_language(language_a) or is_proto_language(language_b):
            return True
        if relationship_type in ALWAYS_COMPATIBLE_TYPES:
            return True

        family_a = language_family(language_a)
        return family_a is not None and family_a == language_family(language_b)

    def _is_modern_coinage(self, lowered: str) -> bool:
        bare = lowered.strip("-")
        for prefix in self.policy.modern_prefixes:
            if bare.startswith(prefix) and len(bare) - len(prefix) >= self.policy.min_affix_stem:
                return True
        for suffix in self.policy.modern_suffixes:
            if bare.endswith(suffix) and len(bare) - len(suffix) >= self.policy.min_affix_stem:
                return True
        return False


# ═════════════════════════════════════════════════════════════════════════════
# Merge-time rules
# ═════════════════════════════════════════════════════════════════════════════

class ValidationRule(Protocol):
    """Protocol for validation rules."""

    def __call__(self, connection: Connection, source_word: Word) -> tuple[bool, str]:
        """Validate candidate, return (is_valid, error_message)."""
        ...


@dataclass(frozen=True)
class ConfidenceFloor:
    """Minimum confidence, lower for reconstructed forms."""

    policy: ValidationPolicy

    def __call__(self, connection: Connection, source_word: Word) -> tuple[bool, str]:
        is_proto = connection.word.text.strip().startswith("*")
        floor = self.policy.proto_confidence_floor if is_proto else self.policy.confidence_floor

        if connection.relationship.confidence < floor:
            return False, f"confidence below {floor}"

        return True, ""


@dataclass(frozen=True)
class NotSemanticallySuspicious:
    """Rejects pairs from mutually exclusive semantic categories."""

    lexicon: LexicalValidator

    def __call__(self, connection: Connection, source_word: Word) -> tuple[bool, str]:
        if self.lexicon.is_semantically_suspicious(
            source_word.text,
            connection.word.text,
            source_word.language,
            connection.word.language
        ):
            return False, "semantically suspicious pairing"

        return True, ""


@dataclass(frozen=True)
class LanguageCompatible:
    """Requires a shared family group unless the edge type allows any pairing."""

    lexicon: LexicalValidator

    def __call__(self, connection: Connection, source_word: Word) -> tuple[bool, str]:
        if not self.lexicon.is_language_compatible(
            source_word.language,
            connection.word.language,
            connection.relationship.type
        ):
            return False, (
                f"incompatible languages {source_word.language}/{connection.word.language}"
            )

        return True, ""


@dataclass(frozen=True)
class ProtoExempt:
    """Skips the wrapped rule for reconstructed forms."""

    rule: ValidationRule

    def __call__(self, connection: Connection, source_word: Word) -> tuple[bool, str]:
        if is_proto_form(connection.word.text, connection.word.language):
            return True, ""
        return self.rule(connection, source_word)


class ConnectionValidator:
    """Composite validator for candidate connections."""

    def __init__(self, rules: list[ValidationRule]):
        self._rules = rules

    def validate(self, connection: Connection, source_word: Word) -> tuple[bool, list[str]]:
        """Validate a candidate against all rules.

        Returns (is_valid, error_messages).
        """
        errors = []

        for rule in self._rules:
            is_valid, error = rule(connection, source_word)
            if not is_valid:
                errors.append(error)

        return len(errors) == 0, errors


class ValidatorFactory:
    """Factory for common validator configurations."""

    @staticmethod
    def merge_validator(lexicon: LexicalValidator) -> ConnectionValidator:
        """Rules applied to every candidate before deduplication."""
        return ConnectionValidator([
            ConfidenceFloor(lexicon.policy),
            ProtoExempt(NotSemanticallySuspicious(lexicon)),
            ProtoExempt(LanguageCompatible(lexicon)),
        ])

    @staticmethod
    def cross_reference_validator(lexicon: LexicalValidator) -> ConnectionValidator:
        """Rules for synthesized cross-reference connections."""
        return ConnectionValidator([
            NotSemanticallySuspicious(lexicon),
            LanguageCompatible(lexicon),
        ])
