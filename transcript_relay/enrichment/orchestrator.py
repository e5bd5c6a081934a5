"""Fan finalized transcript chunks out to the enrichment pipelines."""

from __future__ import annotations

import asyncio
import logging

from transcript_relay.enrichment.consumers import ConsumerCatalog
from transcript_relay.enrichment.models import TranscriptChunk
from transcript_relay.enrichment.pipelines import KeypointPipeline, SpeakerPipeline
from transcript_relay.storage.repositories import KeypointLog, SpeakerDirectory

logger = logging.getLogger(__name__)


class Orchestrator:
    """Entry point for enrichment of finalized chunks.

    ``process`` runs the key-point and speaker pipelines concurrently and
    absorbs their failures: a transport, persistence, or cancellation fault in
    one pipeline is logged and never reaches the caller or the other pipeline.
    Cancelling the task awaiting ``process`` cancels both pipelines and is
    re-raised after logging.
    """

    def __init__(
        self,
        consumers: ConsumerCatalog,
        keypoints: KeypointLog,
        speakers: SpeakerDirectory,
    ) -> None:
        self._speakers = speakers
        self.keypoint_pipeline = KeypointPipeline(consumers.keypoint, keypoints)
        self.speaker_pipeline = SpeakerPipeline(consumers.speaker, speakers)

    async def process(self, chunk: TranscriptChunk) -> None:
        if not chunk.is_enrichable:
            return

        try:
            results = await asyncio.gather(
                self.keypoint_pipeline.process(chunk),
                self.speaker_pipeline.process(chunk),
                return_exceptions=True,
            )
        # Pipeline failures never escape process(), but cancelling the caller's
        # own task does: it is logged and re-raised so timeouts and task groups
        # still see it.
        except asyncio.CancelledError:
            logger.warning("Agent processing cancelled for chunk from %s", chunk.speaker_tag)
            raise

        for pipeline, result in zip(("keypoint", "speaker"), results, strict=True):
            if isinstance(result, BaseException):
                logger.warning(
                    "Agent processing failed in %s pipeline for chunk from %s",
                    pipeline,
                    chunk.speaker_tag,
                    exc_info=result,
                )

    async def update_speaker_manually(
        self, speaker_tag: str, display_name: str, job_title: str
    ) -> None:
        """Write an identity directly, bypassing the speaker consumer and its lock."""
        if not speaker_tag or not speaker_tag.strip():
            return
        await self._speakers.upsert(speaker_tag, display_name, job_title)
