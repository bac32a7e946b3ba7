"""Tests for rule-based cognate generation."""

import pytest

from etymos.core.types import SourceTag
from etymos.services.cognate import RuleBasedCognateGenerator, is_derivative


def by_text(connections):
    return {(c.word.text, c.word.language): c for c in connections}


class TestDirectCognates:
    """Test concept-table lookups."""

    def setup_method(self):
        self.generator = RuleBasedCognateGenerator()

    def test_water_concept(self):
        found = by_text(self.generator.extract(
            "water", "water", "en", target_languages=["es", "de"], include_sound_changes=False
        ))
        assert set(found) == {("agua", "es"), ("wasser", "de")}
        for connection in found.values():
            assert connection.relationship.type == "cognate"
            assert connection.relationship.confidence == 0.95
            assert connection.relationship.shared_root == "water"
            assert connection.relationship.source == SourceTag.COGNATE_RULES.value

    def test_notes_and_origin(self):
        found = by_text(self.generator.extract(
            "mother", "mother", "en", target_languages=["la"], include_sound_changes=False
        ))
        mater = found[("mater", "la")]
        assert mater.relationship.notes == "Direct cognate through mother concept"
        assert mater.relationship.origin == "mother (family_relations)"

    def test_skips_own_language(self):
        found = self.generator.extract(
            "water", "water", "en", target_languages=["en", "es"], include_sound_changes=False
        )
        assert [c.word.language for c in found] == ["es"]

    def test_identical_spelling_skipped(self):
        found = by_text(self.generator.extract(
            "water", "water", "en", target_languages=["nl"], include_sound_changes=False
        ))
        assert found == {}

    def test_unknown_word(self):
        assert self.generator.extract("zyzzyva", "zyzzyva", "en", include_sound_changes=False) == []


class TestSoundChangeCognates:
    """Test rule-derived low-confidence cognates."""

    def setup_method(self):
        self.generator = RuleBasedCognateGenerator()

    def test_germanic_to_romance(self):
        found = by_text(self.generator.extract("house", "house", "en", target_languages=["es"]))
        ouse = found[("ouse", "es")]
        assert ouse.relationship.type == "cognate_romance"
        assert ouse.relationship.confidence == 0.75

    def test_direct_cognates_rank_first(self):
        found = self.generator.extract("house", "house", "en", target_languages=["es"])
        confidences = [c.relationship.confidence for c in found]
        assert confidences == sorted(confidences, reverse=True)
        assert found[0].word.text == "casa"

    def test_disabled(self):
        found = self.generator.extract(
            "house", "house", "en", target_languages=["es"], include_sound_changes=False
        )
        assert all(c.relationship.confidence == 0.95 for c in found)


class TestIsDerivative:
    """Test the derivative filter used for generated cognates."""

    @pytest.mark.parametrize("source,target,sl,tl", [
        ("water", "water", "en", "nl"),
        ("nation", "nación", "en", "es"),
        ("water", "waterless", "en", "en"),
        ("happy", "unhappy", "en", "en"),
    ])
    def test_derivatives(self, source, target, sl, tl):
        assert is_derivative(source, target, sl, tl)

    def test_independent_words(self):
        assert not is_derivative("water", "agua", "en", "es")
