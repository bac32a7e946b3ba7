"""Cross-reference synthesis over the Cross-Reference Index.

Words looked up in earlier queries that share a normalized root with one of
the current candidates become ``etymological_cognate`` connections. Words
previously recorded as shortenings of the query word become
``shortened_to`` connections.
"""

import re
from typing import Iterable, Optional

from etymos.core.types import Connection, RelationshipType, SourceTag, Word
from etymos.observ import get_logger
from etymos.rules.languages import LANGUAGE_NAME_PATTERN, language_name
from etymos.storage.cleaners import normalize_root_key
from etymos.storage.index import CrossReferenceIndex
from etymos.storage.validators import LexicalValidator, ValidatorFactory

logger = get_logger(__name__)


class CrossReferenceResolver:
    """Turns index clusters into synthesized connections for one query."""

    def __init__(self, index: CrossReferenceIndex, lexicon: Optional[LexicalValidator] = None):
        self._index = index
        self._lexicon = lexicon or LexicalValidator()
        self._validator = ValidatorFactory.cross_reference_validator(self._lexicon)

    @property
    def policy(self):
        return self._lexicon.policy

    def resolve(self, connections: Iterable[Connection], source_word: Word) -> list[Connection]:
        """Synthesized cognates and reverse shortenings for ``source_word``."""
        added = []
        visited = set()

        for connection in connections:
            label = connection.relationship.shared_root or connection.relationship.origin
            if not label:
                continue

            key = normalize_root_key(label)
            if key in visited:
                continue
            visited.add(key)

            if not self.is_usable_root(key):
                logger.debug("cross_reference_skipped", reason="generic_root", key=key)
                continue

            added.extend(self._cluster_cognates(key, label, source_word))

        added.extend(self._reverse_shortenings(source_word))
        return added

    def is_usable_root(self, key: str) -> bool:
        """Long enough once markers are stripped, and not a generic root."""
        bare = key.replace("*", "").replace("-", "")
        return len(bare) >= self.policy.min_root_length and key not in self.policy.generic_roots

    def _cluster_cognates(self, key: str, label: str, source_word: Word) -> list[Connection]:
        entries = self._index.lookup_by_root(key)
        if len({entry.source_word_text.lower() for entry in entries}) < 2:
            return []

        best: dict[str, tuple[float, Connection]] = {}
        source = source_word.text.lower()

        for entry in entries:
            member = entry.source_word_text.lower()
            if member == source:
                continue

            confidence = min(
                entry.confidence * self.policy.cross_reference_discount,
                self.policy.cross_reference_cap
            )
            if confidence < self.policy.cross_reference_min_confidence:
                continue

            candidate = Connection.create(
                entry.source_word_text,
                entry.source_language,
                RelationshipType.ETYMOLOGICAL_COGNATE,
                confidence,
                SourceTag.CROSS_REFERENCE,
                notes=f"Shares etymology {label} with {source_word.text}",
                shared_root=label,
                origin=label
            )

            is_valid, errors = self._validator.validate(candidate, source_word)
            if not is_valid:
                logger.debug("cross_reference_rejected", word=entry.source_word_text, errors=errors)
                continue

            if member not in best or confidence > best[member][0]:
                best[member] = (confidence, candidate)

        ranked = sorted(best.values(), key=lambda pair: (-pair[0], pair[1].word.text.lower()))
        return [candidate for _, candidate in ranked[:self.policy.cross_reference_limit]]

    def _reverse_shortenings(self, source_word: Word) -> list[Connection]:
        added = []

        for entry in self._index.lookup_shortened(source_word.text):
            if entry.confidence <= self.policy.shortened_form_threshold:
                continue
            if self._lexicon.is_semantically_suspicious(entry.shortened_form, source_word.text):
                continue

            added.append(Connection.create(
                entry.shortened_form,
                entry.language,
                RelationshipType.SHORTENED_TO,
                min(entry.confidence, self.policy.shortened_form_cap),
                SourceTag.CROSS_REFERENCE,
                notes=f'"{entry.shortened_form}" is a shortened form of "{source_word.text}"',
                shared_root=source_word.text,
                origin=f"Shortened form: {entry.shortened_form}",
                part_of_speech="shortened_form"
            ))

        return added


# ═════════════════════════════════════════════════════════════════════════════
# Shared-root inference
# ═════════════════════════════════════════════════════════════════════════════

_ROOT_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"((?:PIE|Proto-Indo-European|Proto-[A-Z][A-Za-z-]*)\s+\*[^\s,.;:!?()\"']+)"),
    re.compile(r"(\*[^\s,.;:!?()\"']+)"),
    re.compile(
        rf"\b(?:from|borrowed from|via|cognate with|related to)\s+"
        rf"({LANGUAGE_NAME_PATTERN}\s+[^\s,.;:!?()\"']+)"
    ),
    re.compile(rf"^({LANGUAGE_NAME_PATTERN}\s+[^\s,.;:!?()\"']+)"),
)


def extract_shared_root(*texts: Optional[str]) -> Optional[str]:
    """First root-like label ("PIE *wed-", "Latin aqua") found in ``texts``."""
    for text in texts:
        if not text or not text.strip():
            continue
        for pattern in _ROOT_PATTERNS:
            match = pattern.search(text)
            if match:
                value = match.group(1).strip().rstrip(".,;:")
                if value:
                    return value
    return None


def infer_shared_root(source_word: Word, connection: Connection) -> str:
    """Shared root for a connection that did not name one."""
    relationship = connection.relationship
    target = connection.word

    extracted = extract_shared_root(relationship.origin, relationship.notes)
    if extracted:
        return extracted

    if relationship.type in (RelationshipType.DERIVATIVE.value, RelationshipType.COMPOUND.value):
        return source_word.text
    if target.text.startswith("*"):
        return target.text
    if relationship.type == RelationshipType.COGNATE.value and target.language != source_word.language:
        return f"{language_name(target.language)} {target.text}"

    return target.text


def ensure_root_in_notes(notes: str, shared_root: str) -> str:
    root = shared_root.strip()
    if not root or root.lower() in notes.lower():
        return notes
    if not notes:
        return f"Shared etymological element: {root}"
    return f"{notes} (shared root: {root})"


def with_shared_root(source_word: Word, connection: Connection) -> Connection:
    """Copy of ``connection`` with a shared root, inferred when missing."""
    relationship = connection.relationship
    if relationship.shared_root:
        return connection

    root = infer_shared_root(source_word, connection)
    return connection.model_copy(update={
        "relationship": relationship.model_copy(update={
            "shared_root": root,
            "notes": ensure_root_in_notes(relationship.notes, root),
            "origin": relationship.origin or root,
        })
    })
