"""Tests for cross-reference synthesis and shared-root inference."""

import pytest

from etymos.core.types import Connection, SourceTag, Word
from etymos.services.crossref import (
    CrossReferenceResolver,
    extract_shared_root,
    infer_shared_root,
    with_shared_root,
)
from etymos.storage.index import CrossReferenceIndex


def connection(text, language, type="etymology", confidence=0.9, **fields):
    return Connection.create(text, language, type, confidence, SourceTag.ETYMONLINE, **fields)


class TestCrossReferenceResolver:
    """Test cluster synthesis against a populated index."""

    def setup_method(self):
        self.index = CrossReferenceIndex()
        self.resolver = CrossReferenceResolver(self.index)
        for word, confidence in [("water", 0.9), ("wet", 0.95), ("winter", 0.8), ("otter", 0.85)]:
            self.index.record(word, connection("x", "gem-pro", shared_root="*wed-", confidence=confidence))

    def test_cluster_limited_to_two_best(self):
        found = self.resolver.resolve(
            [connection("*wed-", "ine-pro", shared_root="*wed-")],
            Word(text="hydra", language="en")
        )
        assert [c.word.text for c in found] == ["wet", "water"]
        assert found[0].relationship.confidence == pytest.approx(0.85)
        assert found[1].relationship.confidence == pytest.approx(0.81)
        for synthesized in found:
            assert synthesized.relationship.type == "etymological_cognate"
            assert synthesized.relationship.source == SourceTag.CROSS_REFERENCE.value
            assert synthesized.relationship.shared_root == "*wed-"

    def test_excludes_query_word(self):
        found = self.resolver.resolve(
            [connection("wæter", "ang", shared_root="PIE *wed-")],
            Word(text="Water", language="en")
        )
        assert "water" not in [c.word.text for c in found]

    def test_root_visited_once(self):
        found = self.resolver.resolve(
            [
                connection("*wed-", "ine-pro", shared_root="*wed-"),
                connection("wæter", "ang", shared_root="PIE *wed-"),
            ],
            Word(text="hydra", language="en")
        )
        assert len(found) == 2

    def test_single_word_key_is_not_a_cluster(self):
        index = CrossReferenceIndex()
        index.record("water", connection("aqua", "la", shared_root="aqua", confidence=0.95))
        resolver = CrossReferenceResolver(index)

        ewer = Word(text="ewer", language="en")
        assert resolver.resolve([connection("aqua", "la", shared_root="aqua")], ewer) == []

        index.record("ewer", connection("aqua", "la", shared_root="aqua", confidence=0.9))
        found = resolver.resolve([connection("aqua", "la", shared_root="aqua")], ewer)
        assert [c.word.text for c in found] == ["water"]

    def test_low_confidence_members_dropped(self):
        index = CrossReferenceIndex()
        index.record("wet", connection("x", "gem-pro", shared_root="*wed-", confidence=0.7))
        found = CrossReferenceResolver(index).resolve(
            [connection("*wed-", "ine-pro", shared_root="*wed-")],
            Word(text="water", language="en")
        )
        assert found == []

    def test_suspicious_members_rejected(self):
        index = CrossReferenceIndex()
        index.record("fire", connection("x", "gem-pro", shared_root="*wed-", confidence=0.95))
        found = CrossReferenceResolver(index).resolve(
            [connection("*wed-", "ine-pro", shared_root="*wed-")],
            Word(text="water", language="en")
        )
        assert found == []

    def test_generic_roots_skipped(self):
        index = CrossReferenceIndex()
        index.record("wet", connection("x", "en", shared_root="from", confidence=0.95))
        index.record("wet", connection("x", "en", shared_root="*er", confidence=0.95))
        resolver = CrossReferenceResolver(index)
        found = resolver.resolve(
            [connection("a", "en", shared_root="from"), connection("b", "en", shared_root="*er")],
            Word(text="water", language="en")
        )
        assert found == []
        assert not resolver.is_usable_root("*er")
        assert resolver.is_usable_root("*wed-")

    def test_reverse_shortenings(self):
        index = CrossReferenceIndex()
        index.record("exam", connection("examination", "en", type="shortened_from", confidence=0.95))
        index.record("quiz", connection("examination", "en", type="shortened_from", confidence=0.8))
        found = CrossReferenceResolver(index).resolve([], Word(text="examination", language="en"))
        assert len(found) == 1
        exam = found[0]
        assert exam.word.text == "exam"
        assert exam.relationship.type == "shortened_to"
        assert exam.relationship.confidence == pytest.approx(0.9)
        assert exam.word.part_of_speech == "shortened_form"


class TestSharedRootInference:
    """Test root extraction and inference for unlabelled connections."""

    def test_extract_shared_root(self):
        assert extract_shared_root("from PIE *wed- \"water\"") == "PIE *wed-"
        assert extract_shared_root("borrowed from Latin aqua.") == "Latin aqua"
        assert extract_shared_root(None, "", "see *watar") == "*watar"
        assert extract_shared_root(None, "") is None
        assert extract_shared_root("of unknown origin") is None

    def test_origin_wins(self):
        source = Word(text="water", language="en")
        found = connection("wæter", "ang", origin="from PIE *wed-")
        assert infer_shared_root(source, found) == "PIE *wed-"

    def test_derivatives_use_source_word(self):
        source = Word(text="water", language="en")
        assert infer_shared_root(source, connection("watery", "en", type="derivative")) == "water"
        assert infer_shared_root(source, connection("waterfall", "en", type="compound")) == "water"

    def test_reconstructed_and_cognate_forms(self):
        source = Word(text="water", language="en")
        assert infer_shared_root(source, connection("*watar", "gem-pro")) == "*watar"
        assert infer_shared_root(source, connection("aqua", "la", type="cognate")) == "Latin aqua"
        assert infer_shared_root(source, connection("wæter", "ang")) == "wæter"

    def test_with_shared_root(self):
        source = Word(text="water", language="en")
        filled = with_shared_root(source, connection("aqua", "la", type="cognate"))
        assert filled.relationship.shared_root == "Latin aqua"
        assert filled.relationship.origin == "Latin aqua"
        assert filled.relationship.notes == "Shared etymological element: Latin aqua"

    def test_explicit_root_kept(self):
        source = Word(text="water", language="en")
        original = connection("wæter", "ang", shared_root="*wed-")
        assert with_shared_root(source, original) is original
