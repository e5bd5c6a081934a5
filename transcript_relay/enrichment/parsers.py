"""Tolerant decoders for consumer replies.

Consumer output is free text that is only expected to be JSON. A reply that
does not decode into the expected shape yields ``None`` and a DEBUG log line;
it never raises.
"""

from __future__ import annotations

import logging
from datetime import datetime

from pydantic import BaseModel, Field, ValidationError

from transcript_relay.enrichment.models import (
    UNKNOWN_SPEAKER,
    KeypointItem,
    TranscriptChunk,
    as_utc,
)

logger = logging.getLogger(__name__)


class KeypointResponseItem(BaseModel):
    """One element of the key-point consumer's ``items`` array."""

    guest_id: str | None = Field(default=None, alias="guestId")
    point: str | None = None
    todo: bool = False
    suggested_by: str | None = Field(default=None, alias="suggestedBy")
    needs_follow_up: bool = Field(default=False, alias="needsFollowUp")
    timestamp: datetime | None = None


class KeypointResponse(BaseModel):
    """Top-level key-point consumer reply."""

    items: list[KeypointResponseItem] | None = None


class SpeakerResolution(BaseModel):
    """Speaker consumer reply."""

    guest_id: str | None = Field(default=None, alias="guestId")
    guest_name: str | None = Field(default=None, alias="guestName")
    job_title: str | None = Field(default=None, alias="jobTitle")
    confidence: float = 0.0

    @property
    def speaker_tag(self) -> str:
        return self.guest_id or ""

    @property
    def display_name(self) -> str:
        return self.guest_name or ""

    @property
    def title(self) -> str:
        return self.job_title or ""

    @property
    def carries_identity(self) -> bool:
        """A resolution needs a tag plus a name or a title to be worth storing."""
        if not self.speaker_tag.strip():
            return False
        return bool(self.display_name.strip() or self.title.strip())


def _strip_code_fence(text: str) -> str:
    """Unwrap a reply fenced as a single Markdown code block."""
    if not text.startswith("```"):
        return text
    lines = text.splitlines()
    if len(lines) < 2 or lines[-1].strip() != "```":
        return text
    return "\n".join(lines[1:-1]).strip()


def _normalize(response: str | None) -> str:
    return _strip_code_fence((response or "").strip())


def parse_keypoint_response(response: str | None) -> KeypointResponse | None:
    """Decode a key-point reply, or return None when it is blank or malformed."""
    payload = _normalize(response)
    if not payload:
        return None
    try:
        return KeypointResponse.model_validate_json(payload)
    except ValidationError:
        logger.debug("Failed to parse keypoint agent response: %s", payload, exc_info=True)
        return None


def parse_speaker_response(response: str | None) -> SpeakerResolution | None:
    """Decode a speaker reply, or return None when it is blank or malformed."""
    payload = _normalize(response)
    if not payload:
        return None
    try:
        return SpeakerResolution.model_validate_json(payload)
    except ValidationError:
        logger.debug("Failed to parse speaker agent response: %s", payload, exc_info=True)
        return None


def to_keypoint_items(response: KeypointResponse, chunk: TranscriptChunk) -> list[KeypointItem]:
    """Map decoded items to KeypointItem rows, applying field defaults.

    Items whose point text is blank are dropped.
    """
    items: list[KeypointItem] = []
    for entry in response.items or []:
        if not entry.point or not entry.point.strip():
            continue
        speaker_tag = entry.guest_id if entry.guest_id is not None else UNKNOWN_SPEAKER
        # Only absent fields are defaulted; an explicit empty string is kept.
        suggested_by = entry.suggested_by if entry.suggested_by is not None else speaker_tag
        items.append(
            KeypointItem(
                timestamp=as_utc(entry.timestamp) if entry.timestamp else chunk.timestamp,
                speaker_tag=speaker_tag,
                is_action_item=entry.todo,
                text=entry.point,
                suggested_by=suggested_by,
                needs_follow_up=entry.needs_follow_up,
            )
        )
    return items
