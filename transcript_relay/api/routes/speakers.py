"""Speaker directory endpoints: lookup and manual correction."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from transcript_relay.api.dependencies import get_relay
from transcript_relay.api.models import SpeakerResponse, SpeakerUpdateRequest
from transcript_relay.relay import Relay

router = APIRouter()


@router.get("/api/speakers/{speaker_tag}", response_model=SpeakerResponse)
async def get_speaker(speaker_tag: str, relay: Relay = Depends(get_relay)) -> SpeakerResponse:
    identity = await relay.speakers.get_by_speaker_tag(speaker_tag)
    if identity is None:
        raise HTTPException(status_code=404, detail="Speaker not found")
    return SpeakerResponse.from_identity(identity)


@router.put("/api/speakers/{speaker_tag}", response_model=SpeakerResponse)
async def update_speaker(
    speaker_tag: str,
    body: SpeakerUpdateRequest,
    relay: Relay = Depends(get_relay),
) -> SpeakerResponse:
    """Overwrite a speaker's name and title without going through the speaker agent."""
    if not speaker_tag.strip():
        raise HTTPException(status_code=400, detail="Speaker tag must not be blank")

    await relay.orchestrator.update_speaker_manually(speaker_tag, body.display_name, body.job_title)

    identity = await relay.speakers.get_by_speaker_tag(speaker_tag)
    if identity is None:
        raise HTTPException(status_code=404, detail="Speaker not found")
    return SpeakerResponse.from_identity(identity)
