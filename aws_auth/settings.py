"""Function settings loaded from environment variables or .env file."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Function settings.

    Lambda provides AWS_REGION for every invocation; a local .env file can
    supply the same values when running the function by hand.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # No default: a missing region is a configuration error, not us-east-1
    aws_region: str = ""

    log_level: str = "INFO"

    # CloudFormation response PUT
    response_timeout_seconds: float = 30.0


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
