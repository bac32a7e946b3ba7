"""Rule tables: static linguistic data loaded once at import.

Barrel export for language tables, sound changes, concepts, morphology and
the tunable validation policy.
"""

from .languages import (
    PIE,
    UNDETERMINED,
    GENERIC_PROTO,
    LANGUAGE_NAMES,
    FAMILY_GROUPS,
    is_proto_language,
    is_proto_form,
    language_name,
    language_code_from_name,
    normalize_language_code,
    find_language_name,
    language_family,
    language_branches,
)
from .sound_changes import SoundChangeRule, SOUND_CHANGE_RULES, rules_for
from .concepts import CONCEPT_TABLE, ConceptMatch, find_concepts
from .morphology import (
    romance_root,
    germanic_root,
    roots_related,
    is_affix_variant,
    is_cross_language_derivative,
    DERIVATIONAL_SUFFIXES,
    DERIVATIONAL_PREFIXES,
)
from .policy import ValidationPolicy

__all__ = [
    # Languages
    "PIE",
    "UNDETERMINED",
    "GENERIC_PROTO",
    "LANGUAGE_NAMES",
    "FAMILY_GROUPS",
    "is_proto_language",
    "is_proto_form",
    "language_name",
    "language_code_from_name",
    "normalize_language_code",
    "find_language_name",
    "language_family",
    "language_branches",
    # Sound changes
    "SoundChangeRule",
    "SOUND_CHANGE_RULES",
    "rules_for",
    # Concepts
    "CONCEPT_TABLE",
    "ConceptMatch",
    "find_concepts",
    # Morphology
    "romance_root",
    "germanic_root",
    "roots_related",
    "is_affix_variant",
    "is_cross_language_derivative",
    "DERIVATIONAL_SUFFIXES",
    "DERIVATIONAL_PREFIXES",
    # Policy
    "ValidationPolicy",
]
