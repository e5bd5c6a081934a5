"""Pydantic request/response schemas for the Transcript Relay API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from transcript_relay.enrichment.models import (
    UNKNOWN_SPEAKER,
    KeypointItem,
    SpeakerIdentity,
    TranscriptChunk,
)


class ChunkRequest(BaseModel):
    """A recognition result posted by a transcription source."""

    text: str
    speaker_tag: str = UNKNOWN_SPEAKER
    is_final: bool = False
    timestamp: datetime | None = None


class ProcessResponse(BaseModel):
    """Response body for /api/transcripts/process."""

    processed: bool


class ChunkResponse(BaseModel):
    text: str
    speaker_tag: str
    is_final: bool
    timestamp: datetime

    @classmethod
    def from_chunk(cls, chunk: TranscriptChunk) -> ChunkResponse:
        return cls(
            text=chunk.text,
            speaker_tag=chunk.speaker_tag,
            is_final=chunk.is_final,
            timestamp=chunk.timestamp,
        )


class RecordResultResponse(BaseModel):
    """Response body for POST /api/transcripts/results."""

    recorded: bool
    chunk: ChunkResponse | None = None


class KeypointResponse(BaseModel):
    timestamp: datetime
    speaker_tag: str
    is_action_item: bool
    text: str
    suggested_by: str
    needs_follow_up: bool

    @classmethod
    def from_item(cls, item: KeypointItem) -> KeypointResponse:
        return cls(
            timestamp=item.timestamp,
            speaker_tag=item.speaker_tag,
            is_action_item=item.is_action_item,
            text=item.text,
            suggested_by=item.suggested_by,
            needs_follow_up=item.needs_follow_up,
        )


class SpeakerUpdateRequest(BaseModel):
    """Manual identity correction from an operator."""

    display_name: str = ""
    job_title: str = ""


class SpeakerResponse(BaseModel):
    speaker_tag: str
    display_name: str
    job_title: str
    last_updated_utc: datetime

    @classmethod
    def from_identity(cls, identity: SpeakerIdentity) -> SpeakerResponse:
        return cls(
            speaker_tag=identity.speaker_tag,
            display_name=identity.display_name,
            job_title=identity.job_title,
            last_updated_utc=identity.last_updated_utc,
        )
