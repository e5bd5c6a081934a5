"""Data models for transcript chunks and enrichment results."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

UNKNOWN_SPEAKER = "Unknown"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime; naive values are read as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class TranscriptChunk:
    """One recognized utterance emitted by the transcription source."""

    text: str
    speaker_tag: str = UNKNOWN_SPEAKER
    is_final: bool = False
    timestamp: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        object.__setattr__(self, "timestamp", as_utc(self.timestamp))

    @property
    def is_enrichable(self) -> bool:
        """True for final chunks carrying non-blank text."""
        return self.is_final and bool(self.text and self.text.strip())


@dataclass
class KeypointItem:
    """A key point or action item extracted from a chunk."""

    timestamp: datetime
    speaker_tag: str
    is_action_item: bool
    text: str
    suggested_by: str
    needs_follow_up: bool = False


@dataclass
class SpeakerIdentity:
    """Resolved identity for a diarized speaker tag."""

    speaker_tag: str
    display_name: str = ""
    job_title: str = ""
    last_updated_utc: datetime = field(default_factory=utcnow)
