"""Cross-Reference Index.

Process-wide store mapping a normalized shared-root key to the words seen
with that root. It is the only state that outlives a single query; the
merge engine reads it to synthesize cognates between words that were
looked up separately.

Access is serialized through one re-entrant lock. Callers always receive
copies, so a lookup result never changes underneath them.
"""

import threading
from collections import Counter
from typing import Optional

from etymos.core.types import (
    CognateGroup,
    Connection,
    IndexEntry,
    IndexStats,
    RelationshipType,
    ShortenedFormEntry,
)
from etymos.observ import get_logger
from etymos.storage.cleaners import normalize_root_key

logger = get_logger(__name__)


class CrossReferenceIndex:
    """Root-keyed word clusters plus a shortened-form sub-index.

    Lifecycle: construct, ``clear()`` to reset, ``close()`` when done.
    After close, writes are ignored and reads return nothing.
    """

    def __init__(self):
        self._entries: dict[str, list[IndexEntry]] = {}
        self._shortened: dict[str, list[ShortenedFormEntry]] = {}
        self._lock = threading.RLock()
        self._closed = False

    def __enter__(self) -> "CrossReferenceIndex":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    # ─────────────────────────────────────────────────────────────────────────
    # Writes
    # ─────────────────────────────────────────────────────────────────────────

    def record(
        self,
        word_text: str,
        connection: Connection,
        source_language: str = "en"
    ) -> Optional[str]:
        """Remember that ``word_text`` was connected to ``connection.word``.

        Keyed by the connection's shared root, falling back to its origin and
        then to the connected word's own text. Recording the same source word
        under a key twice is a no-op.

        Returns:
            The root key written to, or None when nothing was recorded.
        """
        if self._closed:
            logger.warning("index_write_after_close", word=word_text)
            return None

        relationship = connection.relationship
        label = relationship.shared_root or relationship.origin or connection.word.text
        key = normalize_root_key(label)
        source = word_text.strip()

        if not key or not source:
            logger.debug("index_record_skipped", word=word_text, label=label)
            return None

        entry = IndexEntry(
            source_word_text=source,
            source_language=source_language,
            etymological_form=connection.word.text,
            etymological_language=connection.word.language,
            relationship_type=relationship.type,
            confidence=relationship.confidence,
            shared_root_key=key
        )

        with self._lock:
            bucket = self._entries.setdefault(key, [])
            if not any(_same_word(existing.source_word_text, source) for existing in bucket):
                bucket.append(entry)

            if relationship.type == RelationshipType.SHORTENED_FROM.value:
                self._record_shortening(source, source_language, connection)

        return key

    def _record_shortening(
        self,
        shortened_form: str,
        language: str,
        connection: Connection
    ) -> None:
        full_form = connection.word.text.strip().lower()
        if not full_form:
            return

        forms = self._shortened.setdefault(full_form, [])
        if any(_same_word(existing.shortened_form, shortened_form) for existing in forms):
            return

        forms.append(ShortenedFormEntry(
            shortened_form=shortened_form,
            language=language,
            confidence=connection.relationship.confidence
        ))

    def clear(self) -> None:
        """Drop every recorded entry."""
        with self._lock:
            self._entries.clear()
            self._shortened.clear()
        logger.info("index_cleared")

    def clear_entry(self, word: str, language: Optional[str] = None) -> int:
        """Remove everything recorded for one source word.

        Args:
            word: Source word, compared case-insensitively
            language: Restrict removal to entries recorded for this language

        Returns:
            Number of entries removed
        """
        removed = 0

        with self._lock:
            for key in list(self._entries):
                kept = [
                    entry for entry in self._entries[key]
                    if not (
                        _same_word(entry.source_word_text, word)
                        and (language is None or entry.source_language == language)
                    )
                ]
                removed += len(self._entries[key]) - len(kept)
                if kept:
                    self._entries[key] = kept
                else:
                    del self._entries[key]

            for key in list(self._shortened):
                kept_forms = [
                    entry for entry in self._shortened[key]
                    if not (
                        _same_word(entry.shortened_form, word)
                        and (language is None or entry.language == language)
                    )
                ]
                removed += len(self._shortened[key]) - len(kept_forms)
                if kept_forms:
                    self._shortened[key] = kept_forms
                else:
                    del self._shortened[key]

        logger.info("index_entry_cleared", word=word, language=language, removed=removed)
        return removed

    def close(self) -> None:
        with self._lock:
            self._entries.clear()
            self._shortened.clear()
            self._closed = True

    # ─────────────────────────────────────────────────────────────────────────
    # Reads
    # ─────────────────────────────────────────────────────────────────────────

    def lookup_by_root(self, key: str) -> list[IndexEntry]:
        """All entries under a root key (normalized before lookup)."""
        normalized = normalize_root_key(key)

        with self._lock:
            entries = list(self._entries.get(normalized, ()))

        seen = Counter(entry.source_word_text.lower() for entry in entries)
        duplicates = sorted(word for word, count in seen.items() if count > 1)
        if duplicates:
            logger.warning("index_corruption_detected", key=normalized, duplicates=duplicates)

        return entries

    def lookup_shortened(self, word: str) -> list[ShortenedFormEntry]:
        """Words previously seen as shortenings of ``word``."""
        with self._lock:
            return list(self._shortened.get(word.strip().lower(), ()))

    def keys_for(self, word: str) -> list[str]:
        """Root keys under which ``word`` was recorded as a source word."""
        with self._lock:
            return [
                key for key, entries in self._entries.items()
                if any(_same_word(entry.source_word_text, word) for entry in entries)
            ]

    def find_etymological_cognates(
        self,
        word: str,
        min_confidence: float = 0.7
    ) -> list[CognateGroup]:
        """Other words sharing any root ``word`` was recorded with.

        Only roots the word itself reached with at least ``min_confidence``
        count, and only members at or above the same threshold are returned.
        """
        groups = []

        for key in sorted(self.keys_for(word)):
            entries = self.lookup_by_root(key)
            own = [entry for entry in entries if _same_word(entry.source_word_text, word)]
            if not own or max(entry.confidence for entry in own) < min_confidence:
                continue

            cognates = sorted(
                (
                    entry for entry in entries
                    if not _same_word(entry.source_word_text, word)
                    and entry.confidence >= min_confidence
                ),
                key=lambda entry: (-entry.confidence, entry.source_word_text.lower())
            )
            if cognates:
                groups.append(CognateGroup(shared_root_key=key, cognates=cognates))

        return groups

    def stats(self, top: int = 5) -> IndexStats:
        """Index size and the largest root clusters."""
        with self._lock:
            sizes = {key: len(entries) for key, entries in self._entries.items()}
            source_words = {
                entry.source_word_text.lower()
                for entries in self._entries.values()
                for entry in entries
            }
            shortened_keys = len(self._shortened)

        largest = sorted(sizes.items(), key=lambda item: (-item[1], item[0]))[:top]

        return IndexStats(
            root_keys=len(sizes),
            total_entries=sum(sizes.values()),
            source_words=len(source_words),
            cognate_groups=sum(1 for size in sizes.values() if size > 1),
            shortened_keys=shortened_keys,
            largest_clusters=dict(largest)
        )

    def __len__(self) -> int:
        with self._lock:
            return sum(len(entries) for entries in self._entries.values())


def _same_word(a: str, b: str) -> bool:
    return a.strip().lower() == b.strip().lower()
