"""Affix and root-stripping rules.

Used to recognize pairs that are derivatives of one another rather than
independent etymological relatives.
"""

import re
from typing import Iterable

from etymos.rules.languages import GERMANIC_LANGUAGES, ROMANCE_LANGUAGES


ROMANCE_ENDINGS: tuple[str, ...] = (
    "ción", "sión", "tion", "sion", "zione", "sione", "ção", "são",
    "idad", "ité", "ità", "idade", "tate", "dad",
    "oso", "osa", "eux", "euse",
    "ico", "ica", "ique",
    "al", "ale", "ar", "er", "ir", "are", "ere", "ire",
)

GERMANIC_ENDINGS: tuple[str, ...] = (
    "ing", "ed", "er", "est", "ly", "ness", "ment",
    "en", "an", "ung", "heit", "keit", "lich", "isch",
)

# (English/German suffix, matching Romance suffixes)
CROSS_LANGUAGE_SUFFIXES: tuple[tuple[re.Pattern, re.Pattern], ...] = tuple(
    (re.compile(source), re.compile(target))
    for source, target in (
        (r"tion$", r"(?:ción|tion|zione)$"),
        (r"sion$", r"(?:sión|sion|sione)$"),
        (r"ity$", r"(?:idad|ité|ità)$"),
        (r"ous$", r"(?:oso|eux)$"),
        (r"ic$", r"(?:ico|ique)$"),
        (r"al$", r"(?:al|ale)$"),
    )
)


def strip_ending(word: str, endings: Iterable[str]) -> str:
    """Remove the first matching ending, keeping at least three characters."""
    for ending in endings:
        if word.endswith(ending) and len(word) > len(ending) + 2:
            return word[:-len(ending)]
    return word


def romance_root(word: str) -> str:
    return strip_ending(word, ROMANCE_ENDINGS)


def germanic_root(word: str) -> str:
    return strip_ending(word, GERMANIC_ENDINGS)


def roots_related(root_a: str, root_b: str) -> bool:
    """Equal, or close in length with at most a third positional mismatches."""
    if root_a == root_b:
        return True
    if abs(len(root_a) - len(root_b)) > 2:
        return False

    max_diff = min(len(root_a), len(root_b)) // 3
    differences = sum(1 for a, b in zip(root_a, root_b) if a != b)
    return differences <= max_diff


def is_affix_variant(
    word_a: str,
    word_b: str,
    suffixes: Iterable[str],
    prefixes: Iterable[str] = ()
) -> bool:
    """True if one word is the other plus a listed suffix or prefix.

    Handles the common English spelling changes (y → ies, silent e before
    -ed / -ing) in both directions.
    """
    a = word_a.strip().lower()
    b = word_b.strip().lower()
    if not a or not b:
        return False

    for base, derived in ((a, b), (b, a)):
        for suffix in suffixes:
            if derived == base + suffix:
                return True
            if suffix == "ies" and base.endswith("y") and derived == base[:-1] + "ies":
                return True
            if suffix == "ed" and base.endswith("e") and derived == base + "d":
                return True
            if suffix == "ing" and base.endswith("e") and derived == base[:-1] + "ing":
                return True
        for prefix in prefixes:
            if derived == prefix + base:
                return True

    return False


def is_cross_language_derivative(
    source: str,
    target: str,
    source_language: str,
    target_language: str
) -> bool:
    """Shared root after family-specific ending stripping."""
    source = source.strip().lower()
    target = target.strip().lower()

    source_romance = source_language in ROMANCE_LANGUAGES
    target_romance = target_language in ROMANCE_LANGUAGES

    if source_romance and target_romance:
        root = romance_root(source)
        if root == romance_root(target) and len(root) >= 3:
            return True

    if source_language in ("en", "de") and target_romance:
        for source_suffix, target_suffix in CROSS_LANGUAGE_SUFFIXES:
            if source_suffix.search(source) and target_suffix.search(target):
                if roots_related(source_suffix.sub("", source), target_suffix.sub("", target)):
                    return True

    if source_language in GERMANIC_LANGUAGES and target_language in GERMANIC_LANGUAGES:
        root = germanic_root(source)
        if root == germanic_root(target) and len(root) >= 3:
            return True

    return False


# Broader affix lists for rule-generated cognates, where any same-language
# derivative is noise
DERIVATIONAL_SUFFIXES: tuple[str, ...] = (
    "ing", "ed", "s", "es", "ies", "er", "est", "ly", "ie", "y",
    "ness", "ment", "tion", "sion", "ful", "less", "able", "ible",
    "ist", "ian", "ism", "ity", "hood", "ship", "ward", "wise", "like",
    "ify", "ize", "ise", "ate", "age", "dom", "ory", "ous", "ive", "ant", "ent",
    "al", "ic", "eous", "ious", "ary", "ery", "ure", "ade",
)

DERIVATIONAL_PREFIXES: tuple[str, ...] = (
    "re", "un", "pre", "dis", "mis", "over", "under", "out", "up", "in", "im", "il", "ir",
    "non", "anti", "de", "ex", "sub", "super", "inter", "trans", "semi", "multi", "co",
)
