"""Type-safe exception hierarchy and error codes.

Provides structured error handling with:
- Domain-specific exception taxonomy
- HTTP status code mapping
- Structured error details
- FastAPI integration via exception handlers

The extraction core never raises these to its callers; they are used at the
orchestration and HTTP boundaries, and internally where a parse failure is
caught and turned into an empty candidate list.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class ErrorCode(str, Enum):
    """Type-safe error codes for API responses."""

    # Validation errors (400)
    INVALID_WORD = "invalid_word"
    INVALID_LANGUAGE = "invalid_language"
    INVALID_INPUT = "invalid_input"
    MISSING_FIELD = "missing_field"

    # Processing errors (422)
    EXTRACTION_FAILED = "extraction_failed"
    TRANSFORMATION_FAILED = "transformation_failed"

    # Service errors (500)
    SOURCE_UNAVAILABLE = "source_unavailable"
    EXTERNAL_SERVICE_ERROR = "external_service_error"
    CONFIGURATION_ERROR = "configuration_error"
    INTERNAL_ERROR = "internal_error"


class ErrorDetail(BaseModel):
    """Structured error information for API responses."""

    code: ErrorCode
    message: str
    field: Optional[str] = None
    context: dict = Field(default_factory=dict)


class EtymosError(Exception):
    """Base exception for all application errors.

    Provides structured error information and HTTP status mapping.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        field: Optional[str] = None,
        status_code: int = 500,
        **context
    ):
        self.code = code
        self.message = message
        self.field = field
        self.status_code = status_code
        self.context = context
        super().__init__(message)

    def to_detail(self) -> ErrorDetail:
        """Convert to API error detail."""
        return ErrorDetail(
            code=self.code,
            message=self.message,
            field=self.field,
            context=self.context
        )


# ═════════════════════════════════════════════════════════════════════════════
# Validation Errors (400)
# ═════════════════════════════════════════════════════════════════════════════

class ValidationError(EtymosError):
    """Invalid input data."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INVALID_INPUT,
        field: Optional[str] = None,
        **context
    ):
        super().__init__(
            code=code,
            message=message,
            field=field,
            status_code=400,
            **context
        )


class InvalidWordError(ValidationError):
    """Query word is empty or unusable."""

    def __init__(self, word: str, reason: Optional[str] = None):
        message = f"Invalid word: {word!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(
            message=message,
            code=ErrorCode.INVALID_WORD,
            field="word",
            word=word,
            reason=reason
        )


class InvalidLanguageError(ValidationError):
    """Language code is not supported or malformed."""

    def __init__(self, language: str):
        super().__init__(
            message=f"Invalid language code: {language}",
            code=ErrorCode.INVALID_LANGUAGE,
            field="language",
            language=language
        )


# ═════════════════════════════════════════════════════════════════════════════
# Processing Errors (422)
# ═════════════════════════════════════════════════════════════════════════════

class ProcessingError(EtymosError):
    """Data processing or transformation failed."""

    def __init__(
        self,
        operation: str,
        reason: str,
        code: ErrorCode = ErrorCode.TRANSFORMATION_FAILED,
        **context
    ):
        super().__init__(
            code=code,
            message=f"{operation} failed: {reason}",
            status_code=422,
            operation=operation,
            reason=reason,
            **context
        )


class ExtractionError(ProcessingError):
    """Candidate extraction from a source document failed."""

    def __init__(self, source: str, reason: str, **context):
        super().__init__(
            operation=f"Extraction from '{source}'",
            reason=reason,
            code=ErrorCode.EXTRACTION_FAILED,
            source=source,
            **context
        )


# ═════════════════════════════════════════════════════════════════════════════
# Service Errors (500)
# ═════════════════════════════════════════════════════════════════════════════

class ServiceError(EtymosError):
    """Internal service or infrastructure failure."""

    def __init__(
        self,
        service: str,
        reason: str,
        code: ErrorCode = ErrorCode.EXTERNAL_SERVICE_ERROR,
        **context
    ):
        super().__init__(
            code=code,
            message=f"Service error in {service}: {reason}",
            status_code=500,
            service=service,
            reason=reason,
            **context
        )


class SourceUnavailableError(ServiceError):
    """A collaborator could not deliver its document."""

    def __init__(self, source: str, reason: str, **context):
        super().__init__(
            service=source,
            reason=reason,
            code=ErrorCode.SOURCE_UNAVAILABLE,
            **context
        )


class ConfigurationError(ServiceError):
    """Settings or policy overrides could not be loaded."""

    def __init__(self, setting: str, reason: str, **context):
        super().__init__(
            service="configuration",
            reason=f"{setting}: {reason}",
            code=ErrorCode.CONFIGURATION_ERROR,
            setting=setting,
            **context
        )
