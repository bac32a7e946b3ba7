"""Wiki-markup extractor.

Reads Wiktionary-style wikitext: etymology templates (``{{cog|la|aqua}}``,
``{{inh|en|ang|wæter}}``...), interlanguage links (``[[de:Wasser]]``),
free-text trigger phrases ("cognate with German Wasser") and the
"Derived terms" section. Confidence is fixed per pattern and reflects how
structured the marker was.
"""

import re
from dataclasses import dataclass
from typing import Iterator, NamedTuple, Optional

from etymos.core.types import Connection, RelationshipType, SourceTag
from etymos.observ import get_logger
from etymos.rules.languages import (
    LANGUAGE_NAME_PATTERN,
    UNDETERMINED,
    language_code_from_name,
    language_name,
    normalize_language_code,
)
from etymos.services.base import SourceExtractor, dedupe_max_confidence
from etymos.storage.cleaners import LanguageCodeCleaner, TextNormalizer

logger = get_logger(__name__)


@dataclass(frozen=True)
class TemplateShape:
    """Where a template family keeps its language and word arguments."""
    names: frozenset[str]
    language_arg: int
    word_arg: int
    confidence: float
    kind: str = RelationshipType.COGNATE.value


TEMPLATE_SHAPES: tuple[TemplateShape, ...] = (
    # {{cog|la|aqua}}
    TemplateShape(frozenset({"cog", "cognate", "ncog", "noncog"}), 0, 1, 0.85),
    # {{inh|en|ang|wæter}}: target language first
    TemplateShape(
        frozenset({"der", "der+", "inh", "inh+", "bor", "bor+", "lbor", "cal", "slbor", "obor"}),
        1, 2, 0.85
    ),
    # {{etyl|la|en}} ... handled with the following link as well
    TemplateShape(frozenset({"etyl"}), 0, 2, 0.85),
    # {{m|la|aqua}}
    TemplateShape(frozenset({"m", "mention", "l", "link", "term", "t", "t+"}), 0, 1, 0.80),
)

COMPOUND_TEMPLATES = frozenset({"af", "affix", "prefix", "suffix", "compound", "com"})
COMPOUND_CONFIDENCE = 0.80
LINK_CONFIDENCE = 0.75
PHRASE_CONFIDENCE = 0.75
DERIVATIVE_CONFIDENCE = 0.90
DERIVED_COMPOUND_CONFIDENCE = 0.85

LIST_TEMPLATES = frozenset({"col", "col2", "col3", "col4", "col5", "der2", "der3", "der4", "der5"})

PARTS_OF_SPEECH = frozenset({
    "noun", "proper noun", "verb", "adjective", "adverb", "pronoun",
    "preposition", "conjunction", "interjection", "numeral", "article",
    "determiner", "particle", "prefix", "suffix", "participle",
})

_TEMPLATE_RE = re.compile(r"\{\{\s*([A-Za-z0-9+-]+)\s*\|([^{}]*)\}\}")
_ETYL_LINK_RE = re.compile(r"\{\{\s*etyl\s*\|([^|{}]+)(?:\|[^{}]*)?\}\}\s*(?:'')?\[\[([^\]|]+)(?:\|[^\]]*)?\]\]")
_LANGUAGE_LINK_RE = re.compile(r"\[\[([^:\]|]+):([^\]|]+)(?:\|[^\]]*)?\]\]")
_PLAIN_LINK_RE = re.compile(r"\[\[([^\]|]+)(?:\|[^\]]*)?\]\]")
_TRIGGER_RE = re.compile(
    r"\b(cognate with|compare|related to|borrowed from|inherited from|from)\s+([^.,;\n]+)",
    re.IGNORECASE
)
_NAMED_FORM_RE = re.compile(
    rf"^(?:the\s+)?({LANGUAGE_NAME_PATTERN})\s+(?:''+)?(\*?[^\s,.;:'\[\]{{}}()\"]+)"
)
_HEADING_RE = re.compile(r"^(={2,5})\s*([^=\n]+?)\s*\1\s*$", re.MULTILINE)
_DEFINITION_RE = re.compile(r"^#\s+(.+?)\s*$", re.MULTILINE)

_NORMALIZER = TextNormalizer()


class LanguageReference(NamedTuple):
    language: str
    word: str
    confidence: float
    kind: str
    marker: str


class WikiHeadword(NamedTuple):
    definition: Optional[str]
    part_of_speech: Optional[str]


class WikiMarkupExtractor(SourceExtractor):
    """IExtractor over raw wikitext."""

    source = SourceTag.WIKTIONARY

    def __init__(self, lexicon=None):
        super().__init__(lexicon)
        self._codes = LanguageCodeCleaner()

    def _extract(
        self,
        raw_text: str,
        source_word: str,
        source_language: str,
        **params
    ) -> list[Connection]:
        etymology = self.etymology_text(raw_text)
        own_language = normalize_language_code(source_language)

        candidates = []
        for ref in self.language_references(etymology):
            is_cognate = ref.kind == RelationshipType.COGNATE.value
            if is_cognate and ref.language in (own_language, UNDETERMINED):
                continue

            candidates.append(self._candidate(
                ref.word,
                ref.language,
                ref.kind,
                ref.confidence,
                source_word,
                notes=f"Etymological connection from Wiktionary ({ref.marker})",
                origin=f"{language_name(ref.language)} {ref.word}"
            ))

        candidates.extend(self._derived_terms(raw_text, source_word, own_language))

        return dedupe_max_confidence(candidates)

    # ─────────────────────────────────────────────────────────────────────────
    # Sections
    # ─────────────────────────────────────────────────────────────────────────

    @staticmethod
    def sections(wikitext: str) -> list[tuple[str, str]]:
        """``(heading, body)`` pairs in document order."""
        headings = list(_HEADING_RE.finditer(wikitext))
        result = []
        for i, heading in enumerate(headings):
            end = headings[i + 1].start() if i + 1 < len(headings) else len(wikitext)
            body = wikitext[heading.end():end]
            body = body.split("[[Category:", 1)[0]
            result.append((heading.group(2).strip(), body.strip("\n")))
        return result

    def etymology_text(self, wikitext: str) -> str:
        """All Etymology sections joined; the whole text when there are none."""
        bodies = [
            body for heading, body in self.sections(wikitext)
            if re.fullmatch(r"Etymology(?:\s+\d+)?", heading)
        ]
        return "\n".join(bodies) if bodies else wikitext

    def headword(self, wikitext: Optional[str]) -> WikiHeadword:
        """First definition line and part-of-speech heading for the page."""
        if not wikitext:
            return WikiHeadword(None, None)

        definition = None
        match = _DEFINITION_RE.search(wikitext)
        if match:
            definition = self._plain_text(match.group(1)) or None

        part_of_speech = next(
            (
                heading.lower() for heading, _ in self.sections(wikitext)
                if heading.lower() in PARTS_OF_SPEECH
            ),
            None
        )

        return WikiHeadword(definition, part_of_speech)

    # ─────────────────────────────────────────────────────────────────────────
    # Language references
    # ─────────────────────────────────────────────────────────────────────────

    def language_references(self, text: str) -> list[LanguageReference]:
        """Templates first, then language links, then trigger phrases."""
        refs = list(self._template_references(text))
        refs.extend(self._link_references(text))
        refs.extend(self._phrase_references(text))
        return refs

    def _template_references(self, text: str) -> Iterator[LanguageReference]:
        for match in _TEMPLATE_RE.finditer(text):
            name = match.group(1).strip().lower()
            args = [
                arg.strip() for arg in match.group(2).split("|")
                if "=" not in arg
            ]

            if name in COMPOUND_TEMPLATES:
                if not args:
                    continue
                language = normalize_language_code(args[0])
                for part in args[1:]:
                    if part:
                        yield LanguageReference(
                            language, part, COMPOUND_CONFIDENCE,
                            RelationshipType.COMPOUND.value, f"{{{{{name}}}}}"
                        )
                continue

            shape = next((s for s in TEMPLATE_SHAPES if name in s.names), None)
            if shape is None or len(args) <= max(shape.language_arg, shape.word_arg):
                continue

            word = args[shape.word_arg]
            if word:
                yield LanguageReference(
                    normalize_language_code(args[shape.language_arg]),
                    word,
                    shape.confidence,
                    shape.kind,
                    f"{{{{{name}}}}}"
                )

        for match in _ETYL_LINK_RE.finditer(text):
            yield LanguageReference(
                normalize_language_code(match.group(1)),
                match.group(2).strip(),
                0.85,
                RelationshipType.COGNATE.value,
                "{{etyl}}"
            )

    def _link_references(self, text: str) -> Iterator[LanguageReference]:
        for match in _LANGUAGE_LINK_RE.finditer(text):
            prefix = match.group(1).strip()
            if not self._codes.validate(prefix):
                continue
            yield LanguageReference(
                normalize_language_code(prefix),
                match.group(2).strip(),
                LINK_CONFIDENCE,
                RelationshipType.COGNATE.value,
                "[[lang:word]]"
            )

    def _phrase_references(self, text: str) -> Iterator[LanguageReference]:
        prose = _TEMPLATE_RE.sub(" ", text)
        prose = _PLAIN_LINK_RE.sub(r"\1", prose)

        for match in _TRIGGER_RE.finditer(prose):
            clause = match.group(2).strip()
            named = _NAMED_FORM_RE.match(clause)
            if not named:
                continue

            language = language_code_from_name(named.group(1))
            if not language:
                continue

            yield LanguageReference(
                language,
                named.group(2),
                PHRASE_CONFIDENCE,
                RelationshipType.COGNATE.value,
                match.group(1).lower()
            )

    # ─────────────────────────────────────────────────────────────────────────
    # Derived terms
    # ─────────────────────────────────────────────────────────────────────────

    def _derived_terms(
        self,
        wikitext: str,
        source_word: str,
        language: str
    ) -> list[Optional[Connection]]:
        body = next(
            (body for heading, body in self.sections(wikitext) if heading == "Derived terms"),
            None
        )
        if body is None:
            return []

        source = source_word.lower()
        candidates = []

        for term in self._derived_term_list(body):
            lowered = term.lower()
            if lowered in source and lowered != source:
                kind, confidence = RelationshipType.DERIVATIVE.value, DERIVATIVE_CONFIDENCE
            elif source in lowered and len(lowered) > len(source) + 2:
                kind, confidence = RelationshipType.COMPOUND.value, DERIVED_COMPOUND_CONFIDENCE
            elif source in lowered:
                kind, confidence = RelationshipType.DERIVATIVE.value, DERIVATIVE_CONFIDENCE
            else:
                continue

            candidates.append(self._candidate(
                term,
                language,
                kind,
                confidence,
                source_word,
                notes=f"{kind.capitalize()} of {source_word}"
            ))

        return candidates

    @staticmethod
    def _derived_term_list(body: str) -> list[str]:
        terms = []

        for match in _TEMPLATE_RE.finditer(body):
            if match.group(1).strip().lower() in LIST_TEMPLATES:
                args = [arg.strip() for arg in match.group(2).split("|") if "=" not in arg]
                terms.extend(arg for arg in args[1:] if arg)

        for match in _PLAIN_LINK_RE.finditer(body):
            target = match.group(1).strip()
            if ":" not in target:
                terms.append(target)

        return terms

    @staticmethod
    def _plain_text(markup: str) -> str:
        text = re.sub(r"\[\[(?:[^\]|]+\|)?([^\]]+)\]\]", r"\1", markup)
        text = re.sub(r"\{\{[^{}]*\}\}", "", text)
        text = re.sub(r"'{2,}", "", text)
        return _NORMALIZER.clean(text, lowercase=False)
