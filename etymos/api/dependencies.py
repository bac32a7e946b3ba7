"""Dependency injection container for services.

The Cross-Reference Index is process-wide state, so the service that owns
it is built once at application startup and shared by every request.
"""

from typing import Optional

from etymos.config import get_settings, load_policy
from etymos.observ import get_logger
from etymos.services import EtymologyPipeline, EtymologyService
from etymos.sources import DictionaryClient, EtymonlineClient, WiktionaryClient
from etymos.storage import CrossReferenceIndex

logger = get_logger(__name__)


class ServiceContainer:
    """Container for singleton service instances."""

    _index: Optional[CrossReferenceIndex] = None
    _etymology_service: Optional[EtymologyService] = None

    @classmethod
    def initialize(cls) -> None:
        """Build the index, pipeline and collaborator clients."""
        settings = get_settings()
        policy = load_policy(settings)

        cls._index = CrossReferenceIndex()
        pipeline = EtymologyPipeline(cls._index, settings=settings, policy=policy)
        cls._etymology_service = EtymologyService(
            pipeline,
            wiki=WiktionaryClient(settings),
            scraper=EtymonlineClient(settings),
            dictionary=DictionaryClient(settings)
        )

        logger.info(
            "services_initialized",
            target_languages=len(settings.cognate_target_languages),
            sound_change_cognates=settings.include_sound_change_cognates
        )

    @classmethod
    def get_etymology_service(cls) -> EtymologyService:
        """Get singleton etymology service instance."""
        if cls._etymology_service is None:
            raise RuntimeError(
                "EtymologyService not initialized. "
                "Ensure ServiceContainer.initialize() is called at startup."
            )
        return cls._etymology_service

    @classmethod
    def cleanup(cls) -> None:
        """Close the index and drop service references at shutdown."""
        if cls._index is not None:
            cls._index.close()
        cls._index = None
        cls._etymology_service = None
        logger.info("services_cleaned_up")


# FastAPI dependency functions
def get_etymology_service() -> EtymologyService:
    """Provide etymology service instance for dependency injection."""
    return ServiceContainer.get_etymology_service()
