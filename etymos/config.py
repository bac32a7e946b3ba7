"""Application configuration management.

Loads settings from environment with validation.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

import orjson
from pydantic import Field
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from etymos.errors import ConfigurationError
from etymos.rules.policy import ValidationPolicy


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="ETYMOS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False
    )

    # API
    api_port: int = 8000
    api_host: str = "0.0.0.0"
    cors_origins: list[str] = Field(default=["http://localhost:5173"])

    # Collaborators
    wiktionary_api_url: str = "https://en.wiktionary.org/w/api.php"
    dictionary_api_url: str = "https://api.dictionaryapi.dev/api/v2/entries"
    etymonline_url: str = "https://www.etymonline.com/word"
    user_agent: str = "etymos/0.1 (etymology aggregation)"
    http_timeout: float = 10.0
    max_retries: int = 3
    retry_delay: float = 0.5

    # Pipeline
    cognate_target_languages: list[str] = Field(
        default=[
            "en", "es", "fr", "de", "it", "pt", "la",
            "el", "ru", "pl", "nl", "da", "sv", "no",
        ]
    )
    include_sound_change_cognates: bool = False
    policy_file: Optional[Path] = None

    # Development
    debug: bool = False
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def load_policy(settings: Optional[Settings] = None) -> ValidationPolicy:
    """Build the validation policy, applying overrides from ``policy_file``.

    The file is a JSON object whose keys are ``ValidationPolicy`` fields;
    omitted keys keep their defaults.
    """
    settings = settings or get_settings()

    if settings.policy_file is None:
        return ValidationPolicy()

    try:
        overrides = orjson.loads(settings.policy_file.read_bytes())
    except (OSError, orjson.JSONDecodeError) as e:
        raise ConfigurationError("policy_file", str(e), path=str(settings.policy_file))

    if not isinstance(overrides, dict):
        raise ConfigurationError(
            "policy_file",
            "expected a JSON object",
            path=str(settings.policy_file)
        )

    try:
        return ValidationPolicy(**overrides)
    except PydanticValidationError as e:
        raise ConfigurationError("policy_file", str(e), path=str(settings.policy_file))
