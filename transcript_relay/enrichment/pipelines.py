"""Serialized call-and-persist pipelines for the two enrichment concerns.

Each pipeline owns one lock held across its consumer call and every write
that follows, so at most one request per pipeline is in flight. The two
pipelines never share a lock.
"""

from __future__ import annotations

import asyncio
import logging

from transcript_relay.enrichment.consumers import EnrichmentConsumer
from transcript_relay.enrichment.models import TranscriptChunk
from transcript_relay.enrichment.parsers import (
    parse_keypoint_response,
    parse_speaker_response,
    to_keypoint_items,
)
from transcript_relay.enrichment.prompts import (
    KEYPOINT_SCHEMA_INSTRUCTION,
    SPEAKER_SCHEMA_INSTRUCTION,
    build_prompt_payload,
)
from transcript_relay.storage.repositories import KeypointLog, SpeakerDirectory

logger = logging.getLogger(__name__)


class KeypointPipeline:
    """Extract key points from a chunk and append them to the key-point log."""

    def __init__(self, consumer: EnrichmentConsumer, keypoints: KeypointLog) -> None:
        self._consumer = consumer
        self._keypoints = keypoints
        self._lock = asyncio.Lock()

    async def process(self, chunk: TranscriptChunk) -> None:
        async with self._lock:
            response = await self._consumer.send(
                KEYPOINT_SCHEMA_INSTRUCTION, build_prompt_payload(chunk)
            )
            payload = parse_keypoint_response(response)
            if payload is None:
                return

            # No transaction spans the batch: a failed write leaves earlier items stored.
            items = to_keypoint_items(payload, chunk)
            for item in items:
                await self._keypoints.add(item)
            if items:
                logger.info("Stored %d key points from %s", len(items), chunk.speaker_tag)


class SpeakerPipeline:
    """Resolve a chunk's speaker identity and upsert it into the directory."""

    def __init__(self, consumer: EnrichmentConsumer, speakers: SpeakerDirectory) -> None:
        self._consumer = consumer
        self._speakers = speakers
        self._lock = asyncio.Lock()

    async def process(self, chunk: TranscriptChunk) -> None:
        async with self._lock:
            response = await self._consumer.send(
                SPEAKER_SCHEMA_INSTRUCTION, build_prompt_payload(chunk)
            )
            resolution = parse_speaker_response(response)
            if resolution is None or not resolution.carries_identity:
                return

            # confidence is not used to gate the write.
            await self._speakers.upsert(
                resolution.speaker_tag, resolution.display_name, resolution.title
            )
            logger.info(
                "Resolved speaker %s as %r (%s)",
                resolution.speaker_tag,
                resolution.display_name,
                resolution.title,
            )
