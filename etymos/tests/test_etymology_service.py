"""Tests for the etymology pipeline and its async service boundary."""

import pytest

from etymos.config import Settings
from etymos.core.types import DictionaryEntry, ScrapedPage, SourceDocuments, SourceTag
from etymos.errors import InvalidLanguageError, InvalidWordError, SourceUnavailableError
from etymos.rules.languages import PIE
from etymos.services import EtymologyPipeline, EtymologyService, validate_query
from etymos.storage import CrossReferenceIndex


WATER_MARKUP = "===Etymology===\nFrom {{inh|en|ang|wæter}}. Cognate with {{cog|la|aqua}}.\n"
WATER_PAGE = ScrapedPage(
    html='<p>Old English wæter, from PIE *wed- "water; wet."</p>',
    url="https://www.etymonline.com/word/water"
)


class FakeWiki:
    def __init__(self, markup=None, error=None):
        self.markup = markup
        self.error = error
        self.calls = []

    async def fetch_markup(self, word):
        self.calls.append(word)
        if self.error:
            raise self.error
        return self.markup


class FakeScraper:
    def __init__(self, page=None):
        self.page = page

    async def fetch_page(self, word):
        return self.page


class FakeDictionary:
    def __init__(self, entry=None):
        self.entry = entry
        self.calls = []

    async def fetch_entry(self, word, language="en"):
        self.calls.append((word, language))
        return self.entry


class FakeCandidates:
    def __init__(self, payload):
        self.payload = payload
        self.calls = 0

    async def extract_candidates(self, page, word, language):
        self.calls += 1
        return self.payload


def make_pipeline(index=None, **overrides):
    settings = Settings(cognate_target_languages=["es", "de"], **overrides)
    return EtymologyPipeline(index if index is not None else CrossReferenceIndex(), settings=settings)


class TestValidateQuery:
    """Test caller input checks."""

    def test_normalizes(self):
        assert validate_query("  water ", "EN") == ("water", "en")
        assert validate_query("*wed-", "ine-pro") == ("*wed-", "ine-pro")
        assert validate_query("water", None) == ("water", "en")

    @pytest.mark.parametrize("word", ["", "   ", None, "w" * 101])
    def test_invalid_words(self, word):
        with pytest.raises(InvalidWordError):
            validate_query(word, "en")

    @pytest.mark.parametrize("language", ["e", "english!", "en_US", "1234"])
    def test_invalid_languages(self, language):
        with pytest.raises(InvalidLanguageError):
            validate_query("water", language)


class TestEtymologyPipeline:
    """Test one synchronous query over fixed documents."""

    def setup_method(self):
        self.index = CrossReferenceIndex()
        self.pipeline = make_pipeline(self.index)

    def test_source_word(self):
        word = self.pipeline.build_source_word("water", "EN", SourceDocuments())
        assert (word.text, word.language) == ("water", "en")

    def test_reconstructed_query_defaults_to_pie(self):
        assert self.pipeline.build_source_word("*wed-", "en", SourceDocuments()).language == PIE
        assert self.pipeline.build_source_word("*watar", "gem-pro", SourceDocuments()).language == "gem-pro"

    def test_dictionary_definition_wins(self):
        documents = SourceDocuments(
            wiki_markup="===Noun===\n# A [[liquid]].\n",
            dictionary=DictionaryEntry(word="water", definition="Clear liquid.", part_of_speech="noun")
        )
        word = self.pipeline.build_source_word("water", "en", documents)
        assert word.definition == "Clear liquid."
        assert word.part_of_speech == "noun"

    def test_wiki_headword_fallback(self):
        documents = SourceDocuments(wiki_markup="===Noun===\n# A [[liquid]].\n")
        word = self.pipeline.build_source_word("water", "en", documents)
        assert word.definition == "A liquid."
        assert word.part_of_speech == "noun"

    def test_run_merges_every_source(self):
        documents = SourceDocuments(
            wiki_markup=WATER_MARKUP,
            page=WATER_PAGE,
            dictionary=DictionaryEntry(word="water", origin="from Old English wæter")
        )
        result = self.pipeline.run("water", "en", documents)
        found = {(c.word.text, c.word.language): c for c in result.connections}

        assert ("*wed-", PIE) in found
        assert ("aqua", "la") in found
        assert ("agua", "es") in found
        assert found[("wæter", "ang")].relationship.priority.value in ("high", "medium")
        assert all(c.relationship.shared_root for c in result.connections)

    def test_empty_documents_still_generate_cognates(self):
        result = self.pipeline.run("water", "en", SourceDocuments())
        assert {c.word.text for c in result.connections} == {"agua", "wasser"}

    def test_only_stated_sources_recorded(self):
        self.pipeline.run("water", "en", SourceDocuments())
        assert len(self.index) == 0

        self.pipeline.run("water", "en", SourceDocuments(wiki_markup=WATER_MARKUP))
        assert self.index.keys_for("water")

    def test_extract_all_fills_shared_roots(self):
        source_word = self.pipeline.build_source_word("water", "en", SourceDocuments())
        candidates = self.pipeline.extract_all(source_word, SourceDocuments(wiki_markup=WATER_MARKUP))
        assert set(candidates) == set(SourceTag) - {SourceTag.CROSS_REFERENCE}
        assert all(c.relationship.shared_root for c in candidates[SourceTag.WIKTIONARY])

    def test_cross_references_between_queries(self):
        self.pipeline.run("water", "en", SourceDocuments(page=WATER_PAGE))
        wet_page = ScrapedPage(html="<p>Old English wæt, from PIE *wed- \"wet.\"</p>", url="u")
        result = self.pipeline.run("wet", "en", SourceDocuments(page=wet_page))
        synthesized = [c for c in result.connections if c.relationship.type == "etymological_cognate"]
        assert [c.word.text for c in synthesized] == ["water"]


class TestEtymologyService:
    """Test collaborator fan-out and failure handling."""

    def setup_method(self):
        self.pipeline = make_pipeline()

    @pytest.mark.asyncio
    async def test_find_connections(self):
        dictionary = FakeDictionary(DictionaryEntry(word="water", origin="from Latin aqua"))
        service = EtymologyService(
            self.pipeline,
            wiki=FakeWiki(WATER_MARKUP),
            scraper=FakeScraper(WATER_PAGE),
            dictionary=dictionary
        )
        result = await service.find_connections(" water ", "EN")

        assert result.source_word.text == "water"
        assert dictionary.calls == [("water", "en")]
        assert ("*wed-", PIE) in {(c.word.text, c.word.language) for c in result.connections}

    @pytest.mark.asyncio
    async def test_collaborator_failure_is_absent_document(self):
        service = EtymologyService(
            self.pipeline,
            wiki=FakeWiki(error=SourceUnavailableError("wiktionary", "timeout")),
            scraper=FakeScraper(WATER_PAGE)
        )
        documents = await service.gather_documents("water", "en")
        assert documents.wiki_markup is None
        assert documents.page == WATER_PAGE

    @pytest.mark.asyncio
    async def test_no_collaborators(self):
        service = EtymologyService(self.pipeline)
        documents = await service.gather_documents("water", "en")
        assert documents == SourceDocuments()

    @pytest.mark.asyncio
    async def test_language_model_needs_a_page(self):
        candidates = FakeCandidates([{"word": "aqua", "language": "Latin"}])
        service = EtymologyService(self.pipeline, candidates=candidates)
        documents = await service.gather_documents("water", "en")
        assert documents.llm_candidates is None
        assert candidates.calls == 0

        service = EtymologyService(self.pipeline, scraper=FakeScraper(WATER_PAGE), candidates=candidates)
        result = await service.find_connections("water")
        assert candidates.calls == 1
        aqua = [c for c in result.connections if c.word.text == "aqua"]
        assert aqua[0].relationship.source == SourceTag.ETYMONLINE_AI.value

    @pytest.mark.asyncio
    async def test_invalid_input_raises_before_fetching(self):
        wiki = FakeWiki(WATER_MARKUP)
        service = EtymologyService(self.pipeline, wiki=wiki)
        with pytest.raises(InvalidWordError):
            await service.find_connections("  ")
        with pytest.raises(InvalidLanguageError):
            await service.find_connections("water", "not a language")
        assert wiki.calls == []

    @pytest.mark.asyncio
    async def test_index_administration(self):
        service = EtymologyService(self.pipeline, wiki=FakeWiki(WATER_MARKUP))
        await service.find_connections("water")
        assert service.index_stats().total_entries > 0

        assert service.clear_index_entry("water") > 0
        assert service.index_stats().total_entries == 0

        await service.find_connections("water")
        service.clear_index()
        assert len(service.index) == 0

    def test_blank_words_rejected(self):
        service = EtymologyService(self.pipeline)
        with pytest.raises(InvalidWordError):
            service.clear_index_entry(" ")
        with pytest.raises(InvalidWordError):
            service.find_etymological_cognates("")
        assert service.find_etymological_cognates("water") == []
