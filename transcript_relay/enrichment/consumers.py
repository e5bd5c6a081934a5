"""Chat-backed enrichment consumers.

A consumer turns ``(system_instruction, user_payload_json)`` into the
assistant's free-form reply text. There is no retry, backoff, or timeout at
this layer: SDK errors propagate to the calling pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

from anthropic import AsyncAnthropic
from openai import AsyncAzureOpenAI, AsyncOpenAI

from transcript_relay.config import Settings
from transcript_relay.enrichment.prompts import (
    KEYPOINT_AGENT_INSTRUCTIONS,
    KEYPOINT_AGENT_NAME,
    SPEAKER_AGENT_INSTRUCTIONS,
    SPEAKER_AGENT_NAME,
)
from transcript_relay.pipeline_config import ConsumerProvider


class EnrichmentConsumer(Protocol):
    """Text-in/text-out contract shared by both enrichment pipelines."""

    name: str

    async def send(self, system_instruction: str, user_payload_json: str) -> str: ...


def _system_prompt(instructions: str, system_instruction: str) -> str:
    if not instructions:
        return system_instruction
    return f"{instructions}\n\n{system_instruction}"


class AnthropicConsumer:
    """Consumer backed by the Anthropic Messages API."""

    def __init__(
        self,
        name: str,
        instructions: str,
        client: AsyncAnthropic,
        model: str,
        max_tokens: int = 1024,
    ) -> None:
        self.name = name
        self.instructions = instructions
        self._client = client
        self._model = model
        self._max_tokens = max_tokens

    async def send(self, system_instruction: str, user_payload_json: str) -> str:
        response = await self._client.messages.create(
            model=self._model,
            max_tokens=self._max_tokens,
            system=_system_prompt(self.instructions, system_instruction),
            messages=[{"role": "user", "content": user_payload_json}],
        )
        return _join_text_blocks(response)


def _join_text_blocks(response: Any) -> str:
    """Concatenate the non-blank text blocks of a Messages API reply."""
    parts: list[str] = []
    for block in getattr(response, "content", None) or []:
        if getattr(block, "type", None) != "text":
            continue
        text = getattr(block, "text", "")
        if text and text.strip():
            parts.append(text)
    return "".join(parts)


class OpenAIConsumer:
    """Consumer backed by Chat Completions (OpenAI or Azure OpenAI)."""

    def __init__(
        self,
        name: str,
        instructions: str,
        client: AsyncOpenAI,
        model: str,
        max_tokens: int = 1024,
    ) -> None:
        self.name = name
        self.instructions = instructions
        self._client = client
        self._model = model
        self._max_tokens = max_tokens

    async def send(self, system_instruction: str, user_payload_json: str) -> str:
        response = await self._client.chat.completions.create(
            model=self._model,
            max_tokens=self._max_tokens,
            messages=[
                {"role": "system", "content": _system_prompt(self.instructions, system_instruction)},
                {"role": "user", "content": user_payload_json},
            ],
        )
        if not response.choices:
            return ""
        return response.choices[-1].message.content or ""


@dataclass(frozen=True)
class ConsumerCatalog:
    """The two named consumers used by the orchestrator."""

    keypoint: EnrichmentConsumer
    speaker: EnrichmentConsumer


def _openai_client(settings: Settings) -> AsyncOpenAI:
    if settings.consumer_provider is ConsumerProvider.AZURE_OPENAI:
        if not settings.azure_openai_endpoint:
            raise ValueError("AZURE_OPENAI_ENDPOINT is required for the azure_openai provider.")
        if not settings.azure_openai_api_key:
            raise ValueError("AZURE_OPENAI_API_KEY is required for the azure_openai provider.")
        return AsyncAzureOpenAI(
            api_key=settings.azure_openai_api_key,
            azure_endpoint=settings.azure_openai_endpoint,
            api_version=settings.azure_openai_api_version,
        )
    return AsyncOpenAI(api_key=settings.openai_api_key or None)


def build_consumer_catalog(settings: Settings) -> ConsumerCatalog:
    """Build the key-point and speaker consumers on one shared SDK client."""
    if settings.consumer_provider is ConsumerProvider.ANTHROPIC:
        client = AsyncAnthropic(api_key=settings.anthropic_api_key)
        return ConsumerCatalog(
            keypoint=AnthropicConsumer(
                KEYPOINT_AGENT_NAME,
                KEYPOINT_AGENT_INSTRUCTIONS,
                client,
                settings.llm_model,
                settings.llm_max_tokens,
            ),
            speaker=AnthropicConsumer(
                SPEAKER_AGENT_NAME,
                SPEAKER_AGENT_INSTRUCTIONS,
                client,
                settings.llm_model,
                settings.llm_max_tokens,
            ),
        )

    openai_client = _openai_client(settings)
    return ConsumerCatalog(
        keypoint=OpenAIConsumer(
            KEYPOINT_AGENT_NAME,
            KEYPOINT_AGENT_INSTRUCTIONS,
            openai_client,
            settings.llm_model,
            settings.llm_max_tokens,
        ),
        speaker=OpenAIConsumer(
            SPEAKER_AGENT_NAME,
            SPEAKER_AGENT_INSTRUCTIONS,
            openai_client,
            settings.llm_model,
            settings.llm_max_tokens,
        ),
    )
