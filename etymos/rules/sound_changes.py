"""Sound-change substitution rules.

Rules are tagged records grouped under a key of the form
``<source_branch>_to_<target_branch>`` or a bare ``<source_branch>``; adding a
rule means adding a record here, not code.
"""

import re
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class SoundChangeRule:
    """One regex substitution, optionally limited to a target language or branch.

    Only the first match is replaced.
    """

    pattern: str
    replacement: str
    example: str = ""
    language_filter: Optional[str] = None
    family_filter: Optional[str] = None
    _compiled: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_compiled", re.compile(self.pattern))

    def applies_to(self, target_language: str, target_branches: tuple[str, ...]) -> bool:
        if self.language_filter and self.language_filter != target_language:
            return False
        if self.family_filter and self.family_filter not in target_branches:
            return False
        return True

    def apply(self, word: str) -> str:
        return self._compiled.sub(self.replacement, word, count=1)


SOUND_CHANGE_RULES: dict[str, tuple[SoundChangeRule, ...]] = {
    "germanic_to_romance": (
        SoundChangeRule(r"^h([aeiou])", r"\1", "house -> casa pattern"),
        SoundChangeRule(r"k([aeiou])", r"c\1", "k -> c before vowels"),
        SoundChangeRule(r"w([aeiou])", r"v\1", "w -> v"),
        SoundChangeRule(r"^f", "p", "f -> p (Grimm's law reversed)"),
        SoundChangeRule(r"th", "t", "th -> t"),
    ),
    "latin_to_romance": (
        SoundChangeRule(r"ct", "tt", "factum -> fatto", language_filter="it"),
        SoundChangeRule(r"ct", "ch", "noctem -> noche", language_filter="es"),
        SoundChangeRule(r"ct", "it", "factum -> fait", language_filter="fr"),
        SoundChangeRule(r"^f", "h", "facere -> hacer", language_filter="es"),
    ),
    "indo_european": (
        SoundChangeRule(r"^p", "f", "PIE p -> Germanic f", family_filter="germanic"),
        SoundChangeRule(r"^d", "t", "PIE d -> Germanic t", family_filter="germanic"),
        SoundChangeRule(r"^g", "k", "PIE g -> Germanic k", family_filter="germanic"),
    ),
}


def rules_for(source_branch: str, target_branch: str) -> tuple[SoundChangeRule, ...]:
    """Rules keyed ``source_to_target``, falling back to the source branch's own."""
    return (
        SOUND_CHANGE_RULES.get(f"{source_branch}_to_{target_branch}")
        or SOUND_CHANGE_RULES.get(source_branch, ())
    )
