"""Relay configuration: provider/backend enums and DispatchConfig dataclass."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ConsumerProvider(str, Enum):
    """Chat backends available to the enrichment consumers."""

    ANTHROPIC = "anthropic"
    OPENAI = "openai"
    AZURE_OPENAI = "azure_openai"


class RepositoryBackend(str, Enum):
    """Storage backends for the key-point log and speaker directory."""

    MEMORY = "memory"
    SUPABASE = "supabase"


@dataclass(frozen=True)
class DispatchConfig:
    """Immutable configuration for the chunk dispatcher.

    ``queue_size`` bounds the number of final chunks waiting for enrichment;
    ``workers`` is how many chunks may be handed to the orchestrator at once.
    Pipeline locks still allow only one consumer call per pipeline.
    """

    queue_size: int = 256
    workers: int = 4
