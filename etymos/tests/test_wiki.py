"""Tests for the wiki-markup extractor."""

from etymos.core.types import SourceTag
from etymos.services.wiki import WikiMarkupExtractor


WATER_PAGE = """==English==

===Etymology===
From {{inh|en|ang|wæter}}, from {{inh|en|gem-pro|*watōr}}. Cognate with {{cog|la|aqua}}
and {{cog|de|Wasser}}; compare German ''Wasser'' and [[nl:water]].

===Noun===
{{en-noun}}

# A [[clear]] [[liquid]] that falls as rain.

====Derived terms====
{{col3|en|waterfall|watery|saltwater}}
* [[waterproof]]
* [[Category:Liquids]]

[[Category:English nouns]]
"""


def by_text(connections):
    return {(c.word.text, c.word.language): c for c in connections}


class TestWikiMarkupExtractor:
    """Test template, link and phrase extraction."""

    def setup_method(self):
        self.extractor = WikiMarkupExtractor()

    def test_cognate_template(self):
        found = by_text(self.extractor.extract("{{cog|la|aqua}}", "water", "en"))
        aqua = found[("aqua", "la")]
        assert aqua.relationship.type == "cognate"
        assert 0.80 <= aqua.relationship.confidence <= 0.85
        assert aqua.relationship.source == SourceTag.WIKTIONARY.value
        assert aqua.relationship.priority.value == "medium"

    def test_inheritance_templates_use_third_argument(self):
        found = by_text(self.extractor.extract(WATER_PAGE, "water", "en"))
        assert ("wæter", "ang") in found
        assert ("*watōr", "gem-pro") in found

    def test_skips_cognates_in_own_language(self):
        found = self.extractor.extract("{{cog|en|wet}} {{cog|la|aqua}}", "water", "en")
        assert [c.word.text for c in found] == ["aqua"]

    def test_language_links(self):
        found = by_text(self.extractor.extract(WATER_PAGE, "water", "en"))
        assert ("Wasser", "de") in found
        # [[nl:water]] is the query word's own spelling
        assert ("water", "nl") not in found

    def test_unknown_link_prefix_ignored(self):
        assert self.extractor.extract("[[Wikipedia:Water]]", "water", "en") == []

    def test_trigger_phrases(self):
        found = by_text(self.extractor.extract(
            "Borrowed from Old French ''ewe''. Related to Latin aqua.", "ewer", "en"
        ))
        assert found[("ewe", "fro")].relationship.confidence == 0.75
        assert ("aqua", "la") in found

    def test_compound_templates(self):
        found = by_text(self.extractor.extract("{{af|en|rain|bow}}", "rainbow", "en"))
        assert found[("rain", "en")].relationship.type == "compound"
        assert found[("bow", "en")].relationship.confidence == 0.80

    def test_etyl_followed_by_link(self):
        found = by_text(self.extractor.extract("{{etyl|la|en}} [[aqua]]", "water", "en"))
        assert ("aqua", "la") in found

    def test_dedupes_keeping_max_confidence(self):
        found = self.extractor.extract("{{m|la|aqua}} {{cog|la|aqua}}", "water", "en")
        assert len(found) == 1
        assert found[0].relationship.confidence == 0.85

    def test_derived_terms(self):
        found = by_text(self.extractor.extract(WATER_PAGE, "water", "en"))
        assert found[("waterfall", "en")].relationship.type == "compound"
        assert found[("waterfall", "en")].relationship.confidence == 0.85
        assert found[("watery", "en")].relationship.type == "derivative"
        assert found[("watery", "en")].relationship.confidence == 0.90
        assert ("waterproof", "en") in found
        assert ("Category", "en") not in found

    def test_numbered_list_templates(self):
        for name in ("col2", "col3", "der4"):
            page = f"===Derived terms===\n{{{{{name}|en|waterfall|saltwater}}}}\n"
            found = by_text(self.extractor.extract(page, "water", "en"))
            assert {"waterfall", "saltwater"} <= {text for text, _ in found}

    def test_only_etymology_sections_feed_references(self):
        page = "===Etymology===\nFrom {{inh|en|ang|wæter}}.\n\n===Noun===\nSee {{cog|fr|eau}}."
        found = by_text(self.extractor.extract(page, "water", "en"))
        assert ("wæter", "ang") in found
        assert ("eau", "fr") not in found

    def test_whole_text_without_sections(self):
        found = by_text(self.extractor.extract("Cognate with {{cog|es|agua}}.", "water", "en"))
        assert ("agua", "es") in found

    def test_empty_and_malformed_input(self):
        assert self.extractor.extract(None, "water", "en") == []
        assert self.extractor.extract("   ", "water", "en") == []
        assert self.extractor.extract("{{cog|la", "water", "en") == []
        assert self.extractor.extract("{{cog}}", "water", "en") == []


class TestWikiHeadword:
    """Test definition and part-of-speech extraction."""

    def setup_method(self):
        self.extractor = WikiMarkupExtractor()

    def test_headword(self):
        headword = self.extractor.headword(WATER_PAGE)
        assert headword.definition == "A clear liquid that falls as rain."
        assert headword.part_of_speech == "noun"

    def test_missing(self):
        headword = self.extractor.headword(None)
        assert headword.definition is None
        assert headword.part_of_speech is None

    def test_sections(self):
        headings = [heading for heading, _ in self.extractor.sections(WATER_PAGE)]
        assert headings == ["English", "Etymology", "Noun", "Derived terms"]
