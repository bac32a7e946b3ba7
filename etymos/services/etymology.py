"""Etymology lookup orchestration.

``EtymologyPipeline`` is the synchronous core of one query: run every
extractor over the documents at hand, feed the index, merge.
``EtymologyService`` is the async boundary in front of it: it fans out to
the collaborators, turns their failures into absent documents and validates
the caller's input.
"""

import asyncio
import re
from time import perf_counter
from typing import Any, Awaitable, Optional

from etymos.config import Settings, get_settings
from etymos.core.contracts import (
    ICandidateSource,
    IDictionarySource,
    IScrapeSource,
    IWikiSource,
)
from etymos.core.types import (
    CognateGroup,
    Connection,
    EtymologyResult,
    IndexStats,
    SourceDocuments,
    SourceTag,
    Word,
)
from etymos.errors import InvalidLanguageError, InvalidWordError
from etymos.observ import extracting, get_logger, log_service_call, query_context, timed, timer
from etymos.rules.languages import PIE, is_proto_language, normalize_language_code
from etymos.rules.policy import ValidationPolicy
from etymos.services.cognate import RuleBasedCognateGenerator
from etymos.services.crossref import with_shared_root
from etymos.services.heuristic import HeuristicHTMLExtractor
from etymos.services.llm import LLMCandidateNormalizer
from etymos.services.merge import MergeEngine
from etymos.services.origin import PlainOriginExtractor
from etymos.services.wiki import WikiMarkupExtractor
from etymos.storage.index import CrossReferenceIndex
from etymos.storage.validators import LexicalValidator

logger = get_logger(__name__)


# Only sources that state etymology feed the index
RECORDED_SOURCES = (SourceTag.ETYMONLINE, SourceTag.ETYMONLINE_AI, SourceTag.WIKTIONARY)

MAX_WORD_LENGTH = 100
_LANGUAGE_TAG_RE = re.compile(r"^[A-Za-z]{2,3}(?:-[A-Za-z0-9]{2,8})*$")


class EtymologyPipeline:
    """FindConnections over already-fetched documents."""

    def __init__(
        self,
        index: CrossReferenceIndex,
        settings: Optional[Settings] = None,
        policy: Optional[ValidationPolicy] = None
    ):
        self._settings = settings or get_settings()
        self._index = index

        lexicon = LexicalValidator(policy or ValidationPolicy())
        self.wiki = WikiMarkupExtractor(lexicon)
        self.heuristic = HeuristicHTMLExtractor(lexicon)
        self.origin = PlainOriginExtractor(lexicon)
        self.cognates = RuleBasedCognateGenerator(lexicon)
        self.llm = LLMCandidateNormalizer(lexicon)
        self.merge_engine = MergeEngine(index, lexicon)

    @property
    def index(self) -> CrossReferenceIndex:
        return self._index

    def run(self, word: str, language: str, documents: SourceDocuments) -> EtymologyResult:
        source_word = self.build_source_word(word, language, documents)

        with query_context(source_word.text, source_word.language), timer(logger, "etymology_pipeline"):
            candidates = self.extract_all(source_word, documents)
            self.record(source_word, candidates)
            connections = self.merge_engine.merge(candidates, source_word)

        return EtymologyResult(source_word=source_word, connections=connections)

    def build_source_word(self, word: str, language: str, documents: SourceDocuments) -> Word:
        """Query word with definition and part of speech from the documents.

        Dictionary values win over wiki headword values.
        """
        text = word.strip()
        code = normalize_language_code(language)
        if text.startswith("*") and not is_proto_language(code):
            code = PIE

        headword = self.wiki.headword(documents.wiki_markup)
        entry = documents.dictionary

        return Word(
            text=text,
            language=code,
            definition=(entry.definition if entry else None) or headword.definition,
            part_of_speech=(entry.part_of_speech if entry else None) or headword.part_of_speech
        )

    def extract_all(
        self,
        source_word: Word,
        documents: SourceDocuments
    ) -> dict[SourceTag, list[Connection]]:
        """Run every extractor; sources without a document yield nothing."""
        text, language = source_word.text, source_word.language
        origin_text = documents.dictionary.origin if documents.dictionary else None

        extractors = {
            SourceTag.ETYMONLINE: lambda: self.heuristic.extract(documents.page, text, language),
            SourceTag.ETYMONLINE_AI: lambda: self.llm.extract(documents.llm_candidates, text, language),
            SourceTag.WIKTIONARY: lambda: self.wiki.extract(documents.wiki_markup, text, language),
            SourceTag.DICTIONARY: lambda: self.origin.extract(origin_text, text, language),
            SourceTag.COGNATE_RULES: lambda: self.cognates.extract(
                text,
                text,
                language,
                target_languages=self._settings.cognate_target_languages,
                include_sound_changes=self._settings.include_sound_change_cognates
            ),
        }

        candidates = {}
        for source, extract in extractors.items():
            with extracting(source):
                candidates[source] = [with_shared_root(source_word, c) for c in extract()]
        return candidates

    def record(self, source_word: Word, candidates: dict[SourceTag, list[Connection]]) -> int:
        recorded = 0
        for source in RECORDED_SOURCES:
            for connection in candidates.get(source, ()):
                if self._index.record(source_word.text, connection, source_word.language):
                    recorded += 1
        return recorded


class EtymologyService:
    """Async entry point: FindConnections, ClearIndex, ClearIndexEntry."""

    def __init__(
        self,
        pipeline: EtymologyPipeline,
        wiki: Optional[IWikiSource] = None,
        scraper: Optional[IScrapeSource] = None,
        dictionary: Optional[IDictionarySource] = None,
        candidates: Optional[ICandidateSource] = None
    ):
        self._pipeline = pipeline
        self._wiki = wiki
        self._scraper = scraper
        self._dictionary = dictionary
        self._candidates = candidates

    @property
    def index(self) -> CrossReferenceIndex:
        return self._pipeline.index

    async def find_connections(self, word: str, language: str = "en") -> EtymologyResult:
        """Look a word up across every configured collaborator.

        Raises:
            InvalidWordError: Blank or oversized word
            InvalidLanguageError: Malformed language tag
        """
        word, language = validate_query(word, language)

        with query_context(word, language):
            documents = await self.gather_documents(word, language)
            return self._pipeline.run(word, language, documents)

    @timed(logger)
    async def gather_documents(self, word: str, language: str) -> SourceDocuments:
        """Fetch from all collaborators concurrently; failures become None."""
        wiki_markup, page, entry = await asyncio.gather(
            self._call("wiktionary", "fetch_markup", self._wiki and self._wiki.fetch_markup(word)),
            self._call("etymonline", "fetch_page", self._scraper and self._scraper.fetch_page(word)),
            self._call(
                "dictionary",
                "fetch_entry",
                self._dictionary and self._dictionary.fetch_entry(word, language)
            ),
        )

        llm_candidates = None
        if page is not None and self._candidates is not None:
            llm_candidates = await self._call(
                "language_model",
                "extract_candidates",
                self._candidates.extract_candidates(page, word, language)
            )

        return SourceDocuments(
            wiki_markup=wiki_markup,
            page=page,
            dictionary=entry,
            llm_candidates=llm_candidates
        )

    @staticmethod
    async def _call(service: str, operation: str, call: Optional[Awaitable[Any]]) -> Any:
        if call is None:
            return None

        start = perf_counter()
        result = (await asyncio.gather(call, return_exceptions=True))[0]
        duration_ms = (perf_counter() - start) * 1000

        if isinstance(result, Exception):
            log_service_call(logger, service, operation, duration_ms, error=result)
            return None

        log_service_call(logger, service, operation, duration_ms, found=result is not None)
        return result

    def clear_index(self) -> None:
        self.index.clear()

    def clear_index_entry(self, word: str, language: Optional[str] = None) -> int:
        word = word.strip()
        if not word:
            raise InvalidWordError(word, "word is required")
        return self.index.clear_entry(word, language)

    def index_stats(self) -> IndexStats:
        return self.index.stats()

    def find_etymological_cognates(self, word: str, min_confidence: float = 0.7) -> list[CognateGroup]:
        word = word.strip()
        if not word:
            raise InvalidWordError(word, "word is required")
        return self.index.find_etymological_cognates(word, min_confidence)


def validate_query(word: Optional[str], language: Optional[str]) -> tuple[str, str]:
    """Trimmed word and lowercased language, or a caller error."""
    text = (word or "").strip()
    if not text:
        raise InvalidWordError(text, "word is required")
    if len(text) > MAX_WORD_LENGTH:
        raise InvalidWordError(text, f"longer than {MAX_WORD_LENGTH} characters")

    code = (language or "en").strip()
    if not _LANGUAGE_TAG_RE.match(code):
        raise InvalidLanguageError(code)

    return text, code.lower()
