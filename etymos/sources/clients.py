"""HTTP clients for the document collaborators.

Each client fetches one kind of raw document for a word. A missing page is
``None``; a transport failure or server error is retried with exponential
backoff and, once retries are exhausted, raised as
``SourceUnavailableError``. Parsing the documents is not done here.
"""

import asyncio
from typing import Any, Optional
from urllib.parse import quote

import httpx

from etymos.config import Settings, get_settings
from etymos.core.types import DictionaryEntry, ScrapedPage
from etymos.errors import SourceUnavailableError
from etymos.observ import get_logger
from etymos.storage.cleaners import HTMLCleaner

logger = get_logger(__name__)


class HttpSource:
    """Shared retry loop over an ``httpx.AsyncClient``.

    A client may be injected (tests pass one built on ``httpx.MockTransport``);
    otherwise one is created per request and closed afterwards.
    """

    name = "http"

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None
    ):
        self._settings = settings or get_settings()
        self._client = client

    @property
    def settings(self) -> Settings:
        return self._settings

    async def _get(self, url: str, params: Optional[dict] = None) -> Optional[httpx.Response]:
        """GET with retries; ``None`` when the resource does not exist."""
        if self._client is not None:
            return await self._get_with_retry(self._client, url, params)

        async with httpx.AsyncClient(
            timeout=self._settings.http_timeout,
            headers={"User-Agent": self._settings.user_agent},
            follow_redirects=True
        ) as client:
            return await self._get_with_retry(client, url, params)

    async def _get_with_retry(
        self,
        client: httpx.AsyncClient,
        url: str,
        params: Optional[dict]
    ) -> Optional[httpx.Response]:
        attempts = max(self._settings.max_retries, 1)

        for attempt in range(attempts):
            try:
                response = await client.get(url, params=params)
                if response.status_code == 404:
                    return None
                response.raise_for_status()
                return response
            except httpx.HTTPStatusError as e:
                if e.response.status_code < 500:
                    raise SourceUnavailableError(
                        self.name, f"HTTP {e.response.status_code}", url=url
                    ) from e
                error = e
            except httpx.HTTPError as e:
                error = e

            if attempt == attempts - 1:
                raise SourceUnavailableError(
                    self.name, str(error) or type(error).__name__, url=url, attempts=attempts
                ) from error

            delay = self._settings.retry_delay * (2 ** attempt)
            logger.debug("fetch_retry", source=self.name, attempt=attempt + 1, delay=delay, error=str(error))
            await asyncio.sleep(delay)

        return None


class WiktionaryClient(HttpSource):
    """IWikiSource over the MediaWiki parse API."""

    name = "wiktionary"

    async def fetch_markup(self, word: str) -> Optional[str]:
        word = word.strip()
        if not word:
            return None

        response = await self._get(
            self.settings.wiktionary_api_url,
            params={"action": "parse", "page": word, "prop": "wikitext", "format": "json"}
        )
        if response is None:
            return None

        data = response.json()
        if not isinstance(data, dict) or "error" in data:
            return None

        wikitext = (data.get("parse") or {}).get("wikitext") or {}
        if isinstance(wikitext, str):
            return wikitext or None
        return wikitext.get("*") or None


class EtymonlineClient(HttpSource):
    """IScrapeSource returning the word page with boilerplate removed."""

    name = "etymonline"

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
        cleaner: Optional[HTMLCleaner] = None
    ):
        super().__init__(settings, client)
        self._cleaner = cleaner or HTMLCleaner()

    def url_for(self, word: str) -> str:
        return f"{self.settings.etymonline_url.rstrip('/')}/{quote(word, safe='')}"

    async def fetch_page(self, word: str) -> Optional[ScrapedPage]:
        word = word.strip()
        if not word:
            return None

        url = self.url_for(word)
        response = await self._get(url)
        if response is None or not response.text.strip():
            return None

        return ScrapedPage(html=self._cleaner.clean(response.text), url=url)


class DictionaryClient(HttpSource):
    """IDictionarySource over a free dictionary JSON API."""

    name = "dictionary"

    async def fetch_entry(self, word: str, language: str = "en") -> Optional[DictionaryEntry]:
        word = word.strip()
        if not word:
            return None

        language = (language or "en").lower()
        url = (
            f"{self.settings.dictionary_api_url.rstrip('/')}/"
            f"{quote(language, safe='')}/{quote(word, safe='')}"
        )
        response = await self._get(url)
        if response is None:
            return None

        payload = response.json()
        if not isinstance(payload, list) or not payload or not isinstance(payload[0], dict):
            return None

        return parse_dictionary_entry(payload[0], word)


def parse_dictionary_entry(entry: dict[str, Any], word: str) -> DictionaryEntry:
    """First definition and part of speech, plus the origin sentence."""
    definition = None
    part_of_speech = None

    for meaning in entry.get("meanings") or ():
        if not isinstance(meaning, dict):
            continue

        if part_of_speech is None:
            pos = meaning.get("partOfSpeech")
            if isinstance(pos, str) and pos.strip():
                part_of_speech = pos.strip()

        if definition is None:
            for item in meaning.get("definitions") or ():
                if isinstance(item, dict) and isinstance(item.get("definition"), str):
                    definition = item["definition"]
                    break

    phonetic = entry.get("phonetic")
    if not phonetic:
        phonetic = next(
            (p.get("text") for p in entry.get("phonetics") or () if isinstance(p, dict) and p.get("text")),
            None
        )

    return DictionaryEntry(
        word=entry.get("word") or word,
        origin=entry.get("origin") or entry.get("etymology") or None,
        definition=definition,
        part_of_speech=part_of_speech,
        phonetic=phonetic
    )
