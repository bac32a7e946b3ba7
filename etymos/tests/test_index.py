"""Tests for the Cross-Reference Index."""

import threading

from etymos.core.types import Connection, SourceTag
from etymos.storage.index import CrossReferenceIndex


def connection(text, language, type="etymology", confidence=0.9, **fields):
    return Connection.create(text, language, type, confidence, SourceTag.ETYMONLINE, **fields)


class TestRecording:
    """Test writes and key selection."""

    def setup_method(self):
        self.index = CrossReferenceIndex()

    def test_keyed_by_shared_root(self):
        key = self.index.record("water", connection("wæter", "ang", shared_root="PIE *wed-"))
        assert key == "*wed-"
        entries = self.index.lookup_by_root("*wed-")
        assert len(entries) == 1
        entry = entries[0]
        assert entry.source_word_text == "water"
        assert entry.etymological_form == "wæter"
        assert entry.etymological_language == "ang"
        assert entry.shared_root_key == "*wed-"

    def test_falls_back_to_origin_then_text(self):
        assert self.index.record("water", connection("aqua", "la", origin="Latin aqua")) == "aqua"
        assert self.index.record("water", connection("Wasser", "de")) == "wasser"

    def test_lookup_normalizes_key(self):
        self.index.record("water", connection("wæter", "ang", shared_root="*wed-"))
        assert len(self.index.lookup_by_root("PIE *Wed-")) == 1

    def test_same_source_word_recorded_once(self):
        self.index.record("water", connection("wæter", "ang", shared_root="*wed-"))
        self.index.record("Water", connection("watar", "gem-pro", shared_root="*wed-"))
        assert len(self.index.lookup_by_root("*wed-")) == 1
        assert len(self.index) == 1

    def test_blank_source_word_skipped(self):
        assert self.index.record("  ", connection("aqua", "la")) is None
        assert len(self.index) == 0

    def test_shortened_forms(self):
        self.index.record("exam", connection("examination", "en", type="shortened_from"))
        self.index.record("exam", connection("examination", "en", type="shortened_from"))
        shortened = self.index.lookup_shortened("Examination")
        assert [entry.shortened_form for entry in shortened] == ["exam"]
        assert self.index.lookup_shortened("water") == []

    def test_lookups_return_copies(self):
        self.index.record("water", connection("wæter", "ang", shared_root="*wed-"))
        entries = self.index.lookup_by_root("*wed-")
        entries.clear()
        assert len(self.index.lookup_by_root("*wed-")) == 1

    def test_concurrent_writes(self):
        def write(n):
            self.index.record(f"word{n}", connection("wæter", "ang", shared_root="*wed-"))

        threads = [threading.Thread(target=write, args=(n,)) for n in range(20)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(self.index.lookup_by_root("*wed-")) == 20


class TestClearing:
    """Test clear, clear_entry and close."""

    def setup_method(self):
        self.index = CrossReferenceIndex()
        self.index.record("water", connection("wæter", "ang", shared_root="*wed-"))
        self.index.record("wet", connection("wæt", "ang", shared_root="*wed-"))
        self.index.record("exam", connection("examination", "en", type="shortened_from"))

    def test_clear(self):
        self.index.clear()
        assert len(self.index) == 0
        assert self.index.lookup_by_root("*wed-") == []
        assert self.index.lookup_shortened("examination") == []

    def test_clear_entry(self):
        assert self.index.clear_entry("WATER") == 1
        assert [e.source_word_text for e in self.index.lookup_by_root("*wed-")] == ["wet"]

    def test_clear_entry_removes_shortenings(self):
        # one root entry plus one shortened-form entry
        assert self.index.clear_entry("exam") == 2
        assert self.index.lookup_shortened("examination") == []
        assert self.index.lookup_by_root("examination") == []

    def test_clear_entry_by_language(self):
        assert self.index.clear_entry("water", language="de") == 0
        assert self.index.clear_entry("water", language="en") == 1

    def test_clear_entry_unknown_word(self):
        assert self.index.clear_entry("fire") == 0

    def test_close(self):
        with self.index as index:
            pass
        assert index.closed
        assert len(index) == 0
        assert index.record("water", connection("aqua", "la")) is None
        assert len(index) == 0


class TestQueries:
    """Test cognate groups, keys and stats."""

    def setup_method(self):
        self.index = CrossReferenceIndex()
        self.index.record("water", connection("wæter", "ang", shared_root="*wed-", confidence=0.9))
        self.index.record("wet", connection("wæt", "ang", shared_root="*wed-", confidence=0.8))
        self.index.record("winter", connection("wintar", "gem-pro", shared_root="*wed-", confidence=0.5))
        self.index.record("water", connection("aqua", "la", origin="Latin aqua", confidence=0.6))

    def test_keys_for(self):
        assert sorted(self.index.keys_for("water")) == ["*wed-", "aqua"]
        assert self.index.keys_for("fire") == []

    def test_find_etymological_cognates(self):
        groups = self.index.find_etymological_cognates("water")
        assert len(groups) == 1
        assert groups[0].shared_root_key == "*wed-"
        assert [e.source_word_text for e in groups[0].cognates] == ["wet"]

    def test_lower_threshold_includes_more(self):
        groups = self.index.find_etymological_cognates("water", min_confidence=0.5)
        assert [e.source_word_text for e in groups[0].cognates] == ["wet", "winter"]

    def test_word_below_threshold_has_no_groups(self):
        assert self.index.find_etymological_cognates("winter") == []

    def test_stats(self):
        stats = self.index.stats()
        assert stats.root_keys == 2
        assert stats.total_entries == 4
        assert stats.source_words == 3
        assert stats.cognate_groups == 1
        assert stats.shortened_keys == 0
        assert stats.largest_clusters == {"*wed-": 3, "aqua": 1}
        assert list(self.index.stats(top=1).largest_clusters) == ["*wed-"]
