"""Repository contracts for enrichment output, plus in-memory implementations."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime
from typing import Protocol

from transcript_relay.enrichment.models import KeypointItem, SpeakerIdentity, utcnow


class KeypointLog(Protocol):
    """Append-only log of extracted key points."""

    async def add(self, item: KeypointItem) -> None: ...

    async def get_recent(self, count: int = 50) -> list[KeypointItem]: ...


class SpeakerDirectory(Protocol):
    """Speaker identities keyed by speaker tag, with upsert semantics."""

    async def upsert(self, speaker_tag: str, display_name: str, job_title: str) -> None: ...

    async def get_by_speaker_tag(self, speaker_tag: str) -> SpeakerIdentity | None: ...


class InMemoryKeypointLog:
    """Process-local key-point log."""

    def __init__(self) -> None:
        self._items: list[KeypointItem] = []

    async def add(self, item: KeypointItem) -> None:
        self._items.append(replace(item))

    async def get_recent(self, count: int = 50) -> list[KeypointItem]:
        ordered = sorted(self._items, key=lambda item: item.timestamp, reverse=True)
        return [replace(item) for item in ordered[:count]]

    def __len__(self) -> int:
        return len(self._items)


class InMemorySpeakerDirectory:
    """Process-local speaker directory.

    ``clock`` supplies ``last_updated_utc`` and can be replaced in tests.
    """

    def __init__(self, clock: Callable[[], datetime] = utcnow) -> None:
        self._records: dict[str, SpeakerIdentity] = {}
        self._lock = asyncio.Lock()
        self._clock = clock

    async def upsert(self, speaker_tag: str, display_name: str, job_title: str) -> None:
        async with self._lock:
            existing = self._records.get(speaker_tag)
            if existing is None:
                self._records[speaker_tag] = SpeakerIdentity(
                    speaker_tag=speaker_tag,
                    display_name=display_name,
                    job_title=job_title,
                    last_updated_utc=self._clock(),
                )
                return
            existing.display_name = display_name
            existing.job_title = job_title
            existing.last_updated_utc = self._clock()

    async def get_by_speaker_tag(self, speaker_tag: str) -> SpeakerIdentity | None:
        record = self._records.get(speaker_tag)
        return replace(record) if record is not None else None

    def __len__(self) -> int:
        return len(self._records)
