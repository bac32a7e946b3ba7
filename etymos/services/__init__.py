"""Service layer implementations.

Barrel export for extractors, merge and the lookup service.
"""

from .base import SourceExtractor, dedupe_max_confidence
from .wiki import WikiMarkupExtractor
from .heuristic import HeuristicHTMLExtractor
from .origin import PlainOriginExtractor
from .cognate import RuleBasedCognateGenerator
from .llm import LLMCandidateNormalizer
from .crossref import CrossReferenceResolver, infer_shared_root, with_shared_root
from .merge import MergeEngine
from .etymology import EtymologyPipeline, EtymologyService, validate_query

__all__ = [
    # Extractors
    "SourceExtractor",
    "dedupe_max_confidence",
    "WikiMarkupExtractor",
    "HeuristicHTMLExtractor",
    "PlainOriginExtractor",
    "RuleBasedCognateGenerator",
    "LLMCandidateNormalizer",
    # Cross references
    "CrossReferenceResolver",
    "infer_shared_root",
    "with_shared_root",
    # Merge
    "MergeEngine",
    # Lookup
    "EtymologyPipeline",
    "EtymologyService",
    "validate_query",
]
