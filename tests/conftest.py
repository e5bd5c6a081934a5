"""Shared fakes for relay tests (no external APIs required)."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

import pytest

from transcript_relay.enrichment.consumers import ConsumerCatalog
from transcript_relay.enrichment.models import TranscriptChunk
from transcript_relay.enrichment.orchestrator import Orchestrator
from transcript_relay.storage.repositories import InMemoryKeypointLog, InMemorySpeakerDirectory

CHUNK_TIME = datetime(2025, 3, 4, 15, 30, tzinfo=timezone.utc)


class FakeConsumer:
    """Scripted consumer that records calls and tracks concurrency.

    ``reply`` is returned for every call unless ``replies`` still holds queued
    answers. ``gate`` (when set) blocks each call until it is released.
    """

    def __init__(
        self,
        name: str = "fake",
        reply: str = "",
        replies: list[str] | None = None,
        error: BaseException | None = None,
        delay: float = 0.0,
    ) -> None:
        self.name = name
        self.reply = reply
        self.replies = list(replies or [])
        self.error = error
        self.delay = delay
        self.gate: asyncio.Event | None = None
        self.calls: list[tuple[str, str]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def send(self, system_instruction: str, user_payload_json: str) -> str:
        self.calls.append((system_instruction, user_payload_json))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.gate is not None:
                await self.gate.wait()
            if self.delay:
                await asyncio.sleep(self.delay)
            if self.error is not None:
                raise self.error
            if self.replies:
                return self.replies.pop(0)
            return self.reply
        finally:
            self.in_flight -= 1


class TickingClock:
    """Clock that advances one second per reading."""

    def __init__(self, start: datetime = CHUNK_TIME) -> None:
        self.now = start

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture
def make_chunk() -> Callable[..., TranscriptChunk]:
    def _make(
        text: str = "Let's buy milk tomorrow",
        speaker_tag: str = "Guest-1",
        is_final: bool = True,
        timestamp: datetime = CHUNK_TIME,
    ) -> TranscriptChunk:
        return TranscriptChunk(text, speaker_tag, is_final, timestamp)

    return _make


@pytest.fixture
def keypoint_consumer() -> FakeConsumer:
    return FakeConsumer(name="keypoint-agent", reply='{"items": []}')


@pytest.fixture
def speaker_consumer() -> FakeConsumer:
    return FakeConsumer(name="speaker-identification-agent", reply="{}")


@pytest.fixture
def keypoint_log() -> InMemoryKeypointLog:
    return InMemoryKeypointLog()


@pytest.fixture
def speaker_directory() -> InMemorySpeakerDirectory:
    return InMemorySpeakerDirectory(clock=TickingClock())


@pytest.fixture
def orchestrator(
    keypoint_consumer: FakeConsumer,
    speaker_consumer: FakeConsumer,
    keypoint_log: InMemoryKeypointLog,
    speaker_directory: InMemorySpeakerDirectory,
) -> Orchestrator:
    return Orchestrator(
        ConsumerCatalog(keypoint=keypoint_consumer, speaker=speaker_consumer),
        keypoint_log,
        speaker_directory,
    )
