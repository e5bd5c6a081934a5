"""Fixed instructions and request payloads sent to the enrichment consumers."""

from __future__ import annotations

import json

from transcript_relay.enrichment.models import TranscriptChunk

KEYPOINT_AGENT_NAME = "keypoint-agent"
SPEAKER_AGENT_NAME = "speaker-identification-agent"

KEYPOINT_AGENT_INSTRUCTIONS = (
    "You analyze live meeting transcripts to extract concise key points and "
    "actionable items. Produce compact JSON with keypoints, todos, suggestedBy, "
    "needsFollowUp flags, and guestId associations."
)

SPEAKER_AGENT_INSTRUCTIONS = (
    "You infer the likely speaker identity, real name, and role given "
    "conversation context and optional hints. Respond with JSON containing "
    "guestId, guestName, and jobTitle only when confident."
)

KEYPOINT_SCHEMA_INSTRUCTION = (
    "Always respond with JSON matching schema: "
    '{"items":[{"guestId":string,"point":string,"todo":bool,'
    '"suggestedBy":string,"needsFollowUp":bool,"timestamp":string}]}. '
    "timestamp is optional (ISO-8601). "
    "Return empty items when nothing relevant."
)

SPEAKER_SCHEMA_INSTRUCTION = (
    'Return JSON {"guestId":string,"guestName":string,"jobTitle":string,'
    '"confidence":0-1}. Use guestId from transcript, infer name/title if '
    "possible; otherwise return empty strings for those fields instead of "
    "omitting them."
)


def build_prompt_payload(chunk: TranscriptChunk) -> str:
    """Serialize a chunk into the user message shared by both consumers."""
    return json.dumps(
        {
            "transcript": chunk.text,
            "guestId": chunk.speaker_tag,
            "timestamp": chunk.timestamp.isoformat(),
        }
    )
