"""FastAPI route definitions.

Thin routing layer that delegates to the etymology service.
Follows REST conventions with proper status codes.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from etymos.api.dependencies import get_etymology_service
from etymos.core import CognateGroup, EtymologyResult, IndexStats
from etymos.observ import get_logger
from etymos.services import EtymologyService


logger = get_logger(__name__)
router = APIRouter(prefix="/api/v1")


@router.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


@router.get("/etymology", response_model=EtymologyResult)
async def find_connections(
    word: str = Query(...),
    language: str = Query("en"),
    service: EtymologyService = Depends(get_etymology_service)
) -> EtymologyResult:
    """Ranked etymological connections for a word."""
    logger.info("etymology_requested", word=word, language=language)

    result = await service.find_connections(word, language)

    logger.info("etymology_completed", word=word, connections=len(result.connections))
    return result


@router.get("/index/stats", response_model=IndexStats)
async def index_stats(
    service: EtymologyService = Depends(get_etymology_service)
) -> IndexStats:
    """Size of the cross-reference index."""
    return service.index_stats()


@router.get("/index/cognates", response_model=list[CognateGroup])
async def index_cognates(
    word: str = Query(...),
    min_confidence: float = Query(0.7, ge=0.0, le=1.0),
    service: EtymologyService = Depends(get_etymology_service)
) -> list[CognateGroup]:
    """Words sharing a recorded root with a previously looked-up word."""
    logger.info("index_cognates_requested", word=word, min_confidence=min_confidence)
    return service.find_etymological_cognates(word, min_confidence)


@router.delete("/index")
async def clear_index(
    service: EtymologyService = Depends(get_etymology_service)
) -> dict[str, str]:
    """Administrative reset of the whole index."""
    service.clear_index()
    return {"status": "cleared"}


@router.delete("/index/{word}")
async def clear_index_entry(
    word: str,
    language: Optional[str] = Query(None),
    service: EtymologyService = Depends(get_etymology_service)
) -> dict:
    """Remove every index entry recorded for one source word."""
    removed = service.clear_index_entry(word, language)
    return {"status": "cleared", "word": word, "removed": removed}
