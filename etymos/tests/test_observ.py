"""Tests for lookup-scoped logging context."""

import pytest
from structlog.contextvars import get_contextvars

from etymos.core.types import SourceTag
from etymos.observ import (
    add_source_tier,
    clear_context,
    extracting,
    query_context,
    set_request_id,
    timed,
)


class TestSourceTier:
    """Test tier stamping in the processor chain."""

    @pytest.mark.parametrize("source, tier", [
        ("etymonline", "high"),
        (SourceTag.WIKTIONARY, "medium"),
        ("dictionary-api", "low"),
    ])
    def test_known_sources(self, source, tier):
        assert add_source_tier(None, "info", {"source": source})["tier"] == tier

    def test_unknown_or_missing_source(self):
        assert "tier" not in add_source_tier(None, "info", {"source": "elsewhere"})
        assert "tier" not in add_source_tier(None, "info", {"event": "x"})


class TestLookupContext:
    """Test context binding around queries and extractors."""

    def teardown_method(self):
        clear_context()

    def test_query_and_source_bound(self):
        set_request_id("req-1")
        with query_context("water", "en"):
            with extracting(SourceTag.DICTIONARY):
                bound = get_contextvars()
                assert bound["source"] == "dictionary-api"
                assert bound["query_word"] == "water"
            assert "source" not in get_contextvars()

        assert "query_word" not in get_contextvars()
        assert get_contextvars()["request_id"] == "req-1"

    def test_nested_query_restores_outer(self):
        with query_context("water", "en"):
            with query_context("wet", "en"):
                assert get_contextvars()["query_word"] == "wet"
            assert get_contextvars()["query_word"] == "water"

    def test_clear_context(self):
        set_request_id("req-2")
        clear_context()
        assert get_contextvars() == {}


class TestTimed:
    """Test the timing decorator on plain and async functions."""

    def test_sync_result_and_errors(self):
        @timed()
        def double(x):
            return x * 2

        @timed()
        def fail():
            raise ValueError("boom")

        assert double(2) == 4
        with pytest.raises(ValueError):
            fail()

    @pytest.mark.asyncio
    async def test_async_result(self):
        @timed()
        async def fetch(word):
            return word.upper()

        assert await fetch("water") == "WATER"
