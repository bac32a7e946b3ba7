"""Tests for the HTTP collaborator clients."""

import httpx
import pytest

from etymos.config import Settings
from etymos.errors import SourceUnavailableError
from etymos.sources import DictionaryClient, EtymonlineClient, WiktionaryClient, parse_dictionary_entry


def make_client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def make_settings(**overrides):
    return Settings(retry_delay=0.0, max_retries=3, **overrides)


class TestWiktionaryClient:
    """Test wikitext retrieval."""

    @pytest.mark.asyncio
    async def test_fetch_markup(self):
        seen = {}

        def handler(request):
            seen.update(request.url.params)
            return httpx.Response(200, json={"parse": {"wikitext": {"*": "==English=="}}})

        async with make_client(handler) as client:
            wiki = WiktionaryClient(make_settings(), client)
            assert await wiki.fetch_markup("water") == "==English=="

        assert seen["page"] == "water"
        assert seen["prop"] == "wikitext"
        assert seen["format"] == "json"

    @pytest.mark.asyncio
    async def test_plain_string_wikitext(self):
        def handler(request):
            return httpx.Response(200, json={"parse": {"wikitext": "==English=="}})

        async with make_client(handler) as client:
            assert await WiktionaryClient(make_settings(), client).fetch_markup("water") == "==English=="

    @pytest.mark.asyncio
    async def test_missing_page(self):
        def handler(request):
            return httpx.Response(200, json={"error": {"code": "missingtitle"}})

        async with make_client(handler) as client:
            assert await WiktionaryClient(make_settings(), client).fetch_markup("zzzz") is None

    @pytest.mark.asyncio
    async def test_blank_word_not_fetched(self):
        def handler(request):
            raise AssertionError("no request expected")

        async with make_client(handler) as client:
            assert await WiktionaryClient(make_settings(), client).fetch_markup("  ") is None


class TestRetries:
    """Test the shared retry loop."""

    @pytest.mark.asyncio
    async def test_retries_server_errors(self):
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) < 3:
                return httpx.Response(503)
            return httpx.Response(200, json={"parse": {"wikitext": {"*": "text"}}})

        async with make_client(handler) as client:
            assert await WiktionaryClient(make_settings(), client).fetch_markup("water") == "text"
        assert len(calls) == 3

    @pytest.mark.asyncio
    async def test_gives_up_after_max_retries(self):
        calls = []

        def handler(request):
            calls.append(request)
            raise httpx.ConnectError("connection refused")

        async with make_client(handler) as client:
            with pytest.raises(SourceUnavailableError) as exc_info:
                await WiktionaryClient(make_settings(), client).fetch_markup("water")

        assert len(calls) == 3
        assert exc_info.value.context["service"] == "wiktionary"
        assert exc_info.value.context["attempts"] == 3

    @pytest.mark.asyncio
    async def test_client_errors_not_retried(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(403)

        async with make_client(handler) as client:
            with pytest.raises(SourceUnavailableError):
                await EtymonlineClient(make_settings(), client).fetch_page("water")
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_not_found_is_none(self):
        def handler(request):
            return httpx.Response(404)

        async with make_client(handler) as client:
            assert await EtymonlineClient(make_settings(), client).fetch_page("zzzz") is None


class TestEtymonlineClient:
    """Test page scraping."""

    @pytest.mark.asyncio
    async def test_fetch_page_cleans_markup(self):
        html = (
            "<html><head><script>track()</script></head><body>"
            '<nav>menu</nav><p class="entry">from PIE <i>*wed-</i></p></body></html>'
        )

        def handler(request):
            return httpx.Response(200, text=html)

        async with make_client(handler) as client:
            scraper = EtymonlineClient(make_settings(etymonline_url="https://example.test/word/"), client)
            page = await scraper.fetch_page("water")

        assert page.url == "https://example.test/word/water"
        assert "<i>*wed-</i>" in page.html
        assert "track()" not in page.html
        assert "class=" not in page.html

    def test_url_quotes_word(self):
        scraper = EtymonlineClient(make_settings(etymonline_url="https://example.test/word"))
        assert scraper.url_for("ice cream") == "https://example.test/word/ice%20cream"
        assert scraper.url_for("*wed-") == "https://example.test/word/%2Awed-"

    @pytest.mark.asyncio
    async def test_empty_page(self):
        def handler(request):
            return httpx.Response(200, text="   ")

        async with make_client(handler) as client:
            assert await EtymonlineClient(make_settings(), client).fetch_page("water") is None


class TestDictionaryClient:
    """Test dictionary entries."""

    PAYLOAD = [{
        "word": "water",
        "phonetics": [{"audio": ""}, {"text": "/ˈwɔːtə/"}],
        "origin": "Old English wæter, of Germanic origin",
        "meanings": [
            {"partOfSpeech": " noun ", "definitions": [{"definition": "A colourless liquid."}]},
            {"partOfSpeech": "verb", "definitions": [{"definition": "Pour water over."}]},
        ],
    }]

    @pytest.mark.asyncio
    async def test_fetch_entry(self):
        seen = []

        def handler(request):
            seen.append(request.url.path)
            return httpx.Response(200, json=self.PAYLOAD)

        async with make_client(handler) as client:
            dictionary = DictionaryClient(
                make_settings(dictionary_api_url="https://example.test/api/v2/entries"), client
            )
            entry = await dictionary.fetch_entry("water", "EN")

        assert seen == ["/api/v2/entries/en/water"]
        assert entry.definition == "A colourless liquid."
        assert entry.part_of_speech == "noun"
        assert entry.origin == "Old English wæter, of Germanic origin"
        assert entry.phonetic == "/ˈwɔːtə/"

    @pytest.mark.asyncio
    async def test_unexpected_payload(self):
        def handler(request):
            return httpx.Response(200, json={"title": "No Definitions Found"})

        async with make_client(handler) as client:
            assert await DictionaryClient(make_settings(), client).fetch_entry("zzzz") is None

    def test_parse_sparse_entry(self):
        entry = parse_dictionary_entry({"etymology": "from Latin aqua", "meanings": [None]}, "aqua")
        assert entry.word == "aqua"
        assert entry.origin == "from Latin aqua"
        assert entry.definition is None
        assert entry.part_of_speech is None
        assert entry.phonetic is None
