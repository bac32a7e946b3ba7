"""Heuristic extractor for dictionary-style etymology pages.

Candidates come from typographic markers (underline, italics, in-page
links) whose surrounding text reads as etymological context. A section
with no marker candidates falls back to "from PIE *root" style patterns.
Each candidate is scored against the ±100 characters around it:

    delta = 0.05 * positive phrases - 0.1 * negative phrases
            + 0.1 if a proto-language is mentioned
            + 0.05 if the candidate is a reconstructed form

and kept only when ``delta`` is positive.
"""

import re
from typing import Any, Iterator, NamedTuple, Optional
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup, Tag

from etymos.core.types import Connection, RelationshipType, ScrapedPage, SourceTag
from etymos.observ import get_logger
from etymos.rules.languages import (
    LANGUAGE_NAME_PATTERN,
    PIE,
    find_language_name,
    is_proto_language,
    language_code_from_name,
    language_name,
)
from etymos.services.base import SourceExtractor, dedupe_max_confidence

logger = get_logger(__name__)


WINDOW = 100
LANGUAGE_LOOKBEHIND = 40
MAX_MARKER_WORDS = 3

MARKER_CONFIDENCE = {"u": 0.75, "a": 0.75, "i": 0.70, "em": 0.70}
FALLBACK_CONFIDENCE = 0.80
SHORTENED_CONFIDENCE = 0.90
LIST_CONFIDENCE = 0.85
MAX_CONFIDENCE = 0.95

POSITIVE_WEIGHT = 0.05
NEGATIVE_WEIGHT = 0.1
PROTO_BONUS = 0.1
ASTERISK_BONUS = 0.05

POSITIVE_PHRASES = (
    "from", "cognate with", "derives from", "derived from", "related to",
    "akin to", "compare", "borrowed from", "ultimately from", "source of", "root",
)
NEGATIVE_PHRASES = (
    "meaning", "refers to", "such as", "for example", "see also",
    "as in", "in the sense of", "used in",
)

# Nearest trigger before a marker decides its relationship type
TYPE_TRIGGERS = (
    ("cognate with", RelationshipType.COGNATE),
    ("akin to", RelationshipType.COGNATE),
    ("related to", RelationshipType.COGNATE),
    ("compare", RelationshipType.COGNATE),
    ("borrowed from", RelationshipType.BORROWING),
    ("loan from", RelationshipType.BORROWING),
    ("derived from", RelationshipType.ETYMOLOGY),
    ("derives from", RelationshipType.ETYMOLOGY),
    ("from", RelationshipType.ETYMOLOGY),
)

_PROTO_MENTION_RE = re.compile(r"\bPIE\b|\bProto-|Indo-European")
_PIE_ROOT_RE = re.compile(
    r"(?:\bPIE|Proto-Indo-European)(?:\s+root)?\s+(\*[^\s,.;:!?()\"']+)"
)
_FALLBACK_RE = re.compile(
    r"\bfrom\s+(?:(PIE|Proto-Indo-European)|(Proto-[A-Z][A-Za-z]*(?:-[A-Z][A-Za-z]*)*))"
    r"(?:\s+root)?\s+(\*[^\s,.;:!?()\"']+)"
)
_FALLBACK_NAMED_RE = re.compile(
    rf"\bfrom\s+({LANGUAGE_NAME_PATTERN})\s+([^\s,.;:!?()\"'*][^\s,.;:!?()\"']*)"
)
_SHORTENED_RE = re.compile(
    r"\b(?:shortened|shortening|short|clipped|clipping|truncation|truncated|abbreviation|abbreviated)"
    r"\s+(?:form\s+)?(?:of|from)\s+[\"'“‘]?([A-Za-z][\w'-]*)",
    re.IGNORECASE
)
_FORMS_LIST_RE = re.compile(r"forms all or part of:\s*(.+?)(?:\n\s*\n|$)", re.IGNORECASE | re.DOTALL)
_EVIDENCE_LIST_RE = re.compile(
    r"(?:source of/evidence|evidence for its existence)[^:]*provided by:\s*(.+?)(?:\n\s*\n|$)",
    re.IGNORECASE | re.DOTALL
)
_NAMED_ITEM_RE = re.compile(rf"^({LANGUAGE_NAME_PATTERN})\s+(\S+)")


class Marker(NamedTuple):
    text: str
    tag: str
    start: int


class HeuristicHTMLExtractor(SourceExtractor):
    """IExtractor over cleaned page HTML (or a ``ScrapedPage``)."""

    source = SourceTag.ETYMONLINE

    def _extract(
        self,
        raw_text: Any,
        source_word: str,
        source_language: str,
        url: Optional[str] = None,
        **params
    ) -> list[Connection]:
        if isinstance(raw_text, ScrapedPage):
            html, url = raw_text.html, raw_text.url
        else:
            html = str(raw_text)

        soup = BeautifulSoup(html, "lxml")
        sections = soup.find_all("p") or [soup]

        candidates = []
        for section in sections:
            text = section.get_text()
            if not text.strip():
                continue

            found = [
                self._marker_candidate(marker, text, source_word, source_language)
                for marker in self._markers(section, text, url)
            ]
            found = [c for c in found if c is not None]
            if not found:
                found = self._fallback_candidates(text, source_word)

            candidates.extend(found)
            candidates.extend(self._shortened_forms(text, source_word, source_language))

            if source_word.startswith("*"):
                candidates.extend(self._root_derivatives(text, source_word))
                candidates.extend(self._root_cognates(text, source_word))

        return dedupe_max_confidence(candidates)

    # ─────────────────────────────────────────────────────────────────────────
    # Scoring
    # ─────────────────────────────────────────────────────────────────────────

    @staticmethod
    def context_score(text: str, start: int, end: int, candidate: str) -> float:
        """Confidence delta for a match spanning ``text[start:end]``."""
        raw_window = text[max(0, start - WINDOW):end + WINDOW]
        window = raw_window.lower()

        positives = sum(_count_phrase(window, phrase) for phrase in POSITIVE_PHRASES)
        negatives = sum(_count_phrase(window, phrase) for phrase in NEGATIVE_PHRASES)

        score = positives * POSITIVE_WEIGHT - negatives * NEGATIVE_WEIGHT
        if _PROTO_MENTION_RE.search(raw_window):
            score += PROTO_BONUS
        if candidate.startswith("*"):
            score += ASTERISK_BONUS

        return round(score, 4)

    @staticmethod
    def infer_type(text: str, start: int) -> RelationshipType:
        """Type implied by the closest trigger phrase before ``start``."""
        preceding = text[max(0, start - WINDOW):start].lower()

        # ranked by where the phrase ends; the longer phrase wins a tie
        best, best_rank = RelationshipType.RELATED, (-1, 0)
        for phrase, relationship in TYPE_TRIGGERS:
            position = _last_phrase(preceding, phrase)
            if position < 0:
                continue
            rank = (position + len(phrase), len(phrase))
            if rank > best_rank:
                best, best_rank = relationship, rank

        return best

    # ─────────────────────────────────────────────────────────────────────────
    # Markers
    # ─────────────────────────────────────────────────────────────────────────

    def _markers(self, section: Tag, text: str, url: Optional[str]) -> Iterator[Marker]:
        cursor = 0
        for tag in section.find_all(["u", "i", "em", "a"]):
            if tag.name == "a" and not self._is_in_page_link(tag, url):
                continue

            marker_text = tag.get_text().strip()
            if not marker_text or len(marker_text.split()) > MAX_MARKER_WORDS:
                continue

            start = text.find(marker_text, cursor)
            if start < 0:
                start = text.find(marker_text)
                if start < 0:
                    continue
            else:
                cursor = start + len(marker_text)

            yield Marker(marker_text, tag.name, start)

    @staticmethod
    def _is_in_page_link(tag: Tag, url: Optional[str]) -> bool:
        href = tag.get("href")
        if not href or href.startswith(("#", "mailto:", "javascript:")):
            return False
        if not url:
            return not urlparse(href).netloc

        return urlparse(urljoin(url, href)).netloc == urlparse(url).netloc

    def _marker_candidate(
        self,
        marker: Marker,
        text: str,
        source_word: str,
        source_language: str
    ) -> Optional[Connection]:
        end = marker.start + len(marker.text)
        score = self.context_score(text, marker.start, end, marker.text)
        if score <= 0:
            logger.debug("candidate_dropped", reason="context_score", text=marker.text, score=score)
            return None

        language = self._language_before(text, marker.start, marker.text, source_language)
        confidence = min(MARKER_CONFIDENCE[marker.tag] + score, MAX_CONFIDENCE)

        return self._candidate(
            marker.text,
            language,
            self.infer_type(text, marker.start).value,
            confidence,
            source_word,
            notes=f"Marked <{marker.tag}> in etymology text",
            shared_root=self._section_root(text),
            origin=f"{language_name(language)} {marker.text}"
        )

    @staticmethod
    def _language_before(text: str, start: int, candidate: str, default: str) -> str:
        found = find_language_name(text[max(0, start - LANGUAGE_LOOKBEHIND):start])
        code = found[1] if found else None

        if candidate.startswith("*"):
            return code if code and is_proto_language(code) else PIE
        return code or default

    @staticmethod
    def _section_root(text: str) -> Optional[str]:
        match = _PIE_ROOT_RE.search(text)
        return match.group(1) if match else None

    # ─────────────────────────────────────────────────────────────────────────
    # Fallback patterns
    # ─────────────────────────────────────────────────────────────────────────

    def _fallback_candidates(self, text: str, source_word: str) -> list[Connection]:
        candidates = []

        for match in _FALLBACK_RE.finditer(text):
            form = match.group(3)
            score = self.context_score(text, match.start(), match.end(), form)
            if score <= 0:
                continue

            if match.group(1):
                language, label = PIE, "PIE"
            else:
                label = match.group(2)
                language = language_code_from_name(label) or PIE

            candidates.append(self._candidate(
                form,
                language,
                RelationshipType.ETYMOLOGY.value,
                min(FALLBACK_CONFIDENCE + score, MAX_CONFIDENCE),
                source_word,
                notes=f"From {label} {form}",
                shared_root=form,
                origin=f"{label} {form}"
            ))

        for match in _FALLBACK_NAMED_RE.finditer(text):
            name, form = match.group(1), match.group(2)
            language = language_code_from_name(name)
            score = self.context_score(text, match.start(), match.end(), form)
            if not language or score <= 0:
                continue

            candidates.append(self._candidate(
                form,
                language,
                RelationshipType.ETYMOLOGY.value,
                min(FALLBACK_CONFIDENCE + score, MAX_CONFIDENCE),
                source_word,
                notes=f"From {name} {form}",
                shared_root=self._section_root(text),
                origin=f"{name} {form}"
            ))

        return [c for c in candidates if c is not None]

    # ─────────────────────────────────────────────────────────────────────────
    # Shortenings and root lists
    # ─────────────────────────────────────────────────────────────────────────

    def _shortened_forms(
        self,
        text: str,
        source_word: str,
        source_language: str
    ) -> list[Connection]:
        candidates = []
        for match in _SHORTENED_RE.finditer(text):
            full_form = match.group(1)
            candidates.append(self._candidate(
                full_form,
                source_language,
                RelationshipType.SHORTENED_FROM.value,
                SHORTENED_CONFIDENCE,
                source_word,
                notes=f'"{source_word}" is a shortened form of "{full_form}"',
                shared_root=full_form,
                origin=f"Shortened from {full_form}"
            ))
        return [c for c in candidates if c is not None]

    def _root_derivatives(self, text: str, source_word: str) -> list[Connection]:
        match = _FORMS_LIST_RE.search(text)
        if not match:
            return []

        candidates = []
        for item in re.split(r"[;,]", match.group(1)):
            form = re.sub(r"\([^)]*\)", "", item).strip()
            if not form or len(form.split()) > MAX_MARKER_WORDS:
                continue
            candidates.append(self._candidate(
                form,
                "en",
                RelationshipType.PIE_DERIVATIVE.value,
                LIST_CONFIDENCE,
                source_word,
                notes=f"Forms all or part of: derived from {source_word}",
                shared_root=source_word,
                origin=f"PIE {source_word}"
            ))
        return [c for c in candidates if c is not None]

    def _root_cognates(self, text: str, source_word: str) -> list[Connection]:
        match = _EVIDENCE_LIST_RE.search(text)
        if not match:
            return []

        candidates = []
        for item in match.group(1).split(";"):
            named = _NAMED_ITEM_RE.match(item.strip())
            if not named:
                continue
            language = language_code_from_name(named.group(1))
            if not language:
                continue
            candidates.append(self._candidate(
                named.group(2),
                language,
                RelationshipType.COGNATE.value,
                LIST_CONFIDENCE,
                source_word,
                notes=f"Evidence for {source_word}",
                shared_root=source_word,
                origin=f"{named.group(1)} {named.group(2)}"
            ))
        return [c for c in candidates if c is not None]


def _count_phrase(window: str, phrase: str) -> int:
    return len(re.findall(rf"\b{re.escape(phrase)}\b", window))


def _last_phrase(window: str, phrase: str) -> int:
    positions = [m.start() for m in re.finditer(rf"\b{re.escape(phrase)}\b", window)]
    return positions[-1] if positions else -1
