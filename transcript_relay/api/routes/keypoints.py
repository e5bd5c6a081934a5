from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from transcript_relay.api.dependencies import get_relay
from transcript_relay.api.models import KeypointResponse
from transcript_relay.relay import Relay

router = APIRouter()


@router.get("/api/keypoints", response_model=list[KeypointResponse])
async def recent_keypoints(
    limit: int = Query(default=50, ge=1, le=500),
    relay: Relay = Depends(get_relay),
) -> list[KeypointResponse]:
    """List the most recent key points, newest first."""
    items = await relay.keypoints.get_recent(limit)
    return [KeypointResponse.from_item(item) for item in items]
