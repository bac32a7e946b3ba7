"""Tunable validation policy.

Every hand-tuned word list and threshold the validators, the merge engine and
the cross-reference resolver consult lives here, so it can be overridden from
a JSON policy file (see ``etymos.config.load_policy``).
"""

from pydantic import BaseModel, ConfigDict, Field


DEFAULT_STOPWORDS = frozenset({
    "a", "an", "the", "and", "or", "but", "nor", "of", "in", "on", "at", "to",
    "for", "by", "as", "with", "from", "into", "via", "is", "was", "are", "be",
    "been", "it", "its", "this", "that", "these", "those", "which", "who",
    "whose", "see", "also", "compare", "cf", "etc", "ie", "eg", "word", "words",
    "form", "forms", "meaning", "sense", "related", "same", "root", "source",
    "origin", "probably", "perhaps", "possibly", "uncertain", "unknown",
    "cognate", "cognates", "literally", "variant", "century",
})

DEFAULT_CATEGORIES: dict[str, frozenset[str]] = {
    "elements": frozenset({"fire", "water", "earth", "air", "wind"}),
    "colors": frozenset({
        "red", "blue", "green", "yellow", "black", "white",
        "brown", "purple", "orange", "pink", "gray", "grey",
    }),
    "numerals": frozenset({
        "one", "two", "three", "four", "five",
        "six", "seven", "eight", "nine", "ten",
    }),
}


class ValidationPolicy(BaseModel):
    """Word lists and thresholds for the lexical validators and the merge."""
    model_config = ConfigDict(frozen=True)

    # Plausible-form checks
    stopwords: frozenset[str] = DEFAULT_STOPWORDS
    modern_prefixes: tuple[str, ...] = ("cyber", "nano", "crypto", "robo")
    modern_suffixes: tuple[str, ...] = ("tech", "app", "ware", "bot")
    min_affix_stem: int = Field(default=3, ge=1)
    min_form_length: int = Field(default=2, ge=1)

    # Morphological components and trivial derivatives
    inflectional_suffixes: tuple[str, ...] = ("ing", "ed", "s", "es", "ies", "er", "est")
    derivational_suffixes: tuple[str, ...] = ("ly", "ness", "ment")
    negative_prefixes: tuple[str, ...] = ("un", "dis", "non")

    # Semantic suspicion
    semantic_categories: dict[str, frozenset[str]] = Field(
        default_factory=lambda: dict(DEFAULT_CATEGORIES)
    )
    exclusive_categories: tuple[tuple[str, str], ...] = (
        ("elements", "colors"),
        ("elements", "numerals"),
        ("colors", "numerals"),
    )
    suspicious_pairs: tuple[tuple[str, str], ...] = (
        ("water", "fire"),
        ("water", "punjab"),
        ("test", "forest"),
    )

    # Merge floors
    confidence_floor: float = Field(default=0.5, ge=0.0, le=1.0)
    proto_confidence_floor: float = Field(default=0.4, ge=0.0, le=1.0)

    # Cross-reference synthesis
    generic_roots: frozenset[str] = frozenset({
        "*er", "*ed", "*in", "*on", "*an", "*el", "the", "and", "from",
    })
    min_root_length: int = Field(default=3, ge=1)
    cross_reference_discount: float = Field(default=0.9, ge=0.0, le=1.0)
    cross_reference_cap: float = Field(default=0.85, ge=0.0, le=1.0)
    cross_reference_min_confidence: float = Field(default=0.65, ge=0.0, le=1.0)
    cross_reference_limit: int = Field(default=2, ge=0)
    shortened_form_threshold: float = Field(default=0.8, ge=0.0, le=1.0)
    shortened_form_cap: float = Field(default=0.9, ge=0.0, le=1.0)

    @property
    def trivial_suffixes(self) -> tuple[str, ...]:
        return self.inflectional_suffixes + self.derivational_suffixes

    def categories_of(self, word: str) -> set[str]:
        word = word.strip().lower()
        return {name for name, members in self.semantic_categories.items() if word in members}

    def are_exclusive(self, category_a: str, category_b: str) -> bool:
        pair = {category_a, category_b}
        return any(set(exclusive) == pair for exclusive in self.exclusive_categories)

    def is_suspicious_pair(self, word_a: str, word_b: str) -> bool:
        pair = {word_a.strip().lower(), word_b.strip().lower()}
        return any({a, b} == pair for a, b in self.suspicious_pairs)
