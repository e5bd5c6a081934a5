from __future__ import annotations

import logging
from functools import lru_cache

from pydantic_settings import BaseSettings

from transcript_relay.pipeline_config import ConsumerProvider


class Settings(BaseSettings):
    """Application settings validated via Pydantic.

    Values are loaded from environment variables and/or a .env file.
    """

    # API Keys
    anthropic_api_key: str = ""
    openai_api_key: str = ""

    # Azure OpenAI (only used when consumer_provider is "azure_openai")
    azure_openai_api_key: str = ""
    azure_openai_endpoint: str = ""
    azure_openai_api_version: str = "2024-10-21"

    # Enrichment consumers
    consumer_provider: ConsumerProvider = ConsumerProvider.ANTHROPIC
    llm_model: str = "claude-sonnet-4-20250514"
    llm_max_tokens: int = 1024

    # Supabase (in-memory repositories are used when the URL is empty)
    supabase_url: str = ""
    supabase_key: str = ""
    keypoints_table: str = "keypoints"
    speakers_table: str = "speakers"

    # Dispatch
    dispatch_queue_size: int = 256
    dispatch_workers: int = 4

    # App config
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Gracefully handles missing .env files (e.g. in CI/testing) by falling
    back to environment variables and defaults.
    """
    try:
        return Settings()
    except Exception:
        # If .env is missing or unreadable, build settings from env vars only.
        return Settings(_env_file=None)  # type: ignore[call-arg]


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the relay process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


settings = get_settings()
