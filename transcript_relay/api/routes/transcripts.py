"""Transcript endpoints: enrich a chunk directly or feed the live session."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from transcript_relay.api.dependencies import get_relay
from transcript_relay.api.models import (
    ChunkRequest,
    ChunkResponse,
    ProcessResponse,
    RecordResultResponse,
)
from transcript_relay.enrichment.models import TranscriptChunk, utcnow
from transcript_relay.relay import Relay

router = APIRouter()


@router.post("/api/transcripts/process", response_model=ProcessResponse)
async def process_chunk(body: ChunkRequest, relay: Relay = Depends(get_relay)) -> ProcessResponse:
    """Run both enrichment pipelines for one chunk and wait for them.

    Enrichment failures are logged, never returned: the response only says
    whether the chunk passed the final/non-empty gate.
    """
    chunk = TranscriptChunk(
        text=body.text,
        speaker_tag=body.speaker_tag,
        is_final=body.is_final,
        timestamp=body.timestamp or utcnow(),
    )

    await relay.orchestrator.process(chunk)
    return ProcessResponse(processed=chunk.is_enrichable)


@router.post(
    "/api/transcripts/results",
    response_model=RecordResultResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def record_result(
    body: ChunkRequest, relay: Relay = Depends(get_relay)
) -> RecordResultResponse:
    """Record a live recognition result; final results are queued for enrichment."""
    chunk = relay.session.handle_result(body.text, body.speaker_tag, body.is_final, body.timestamp)
    if chunk is None:
        return RecordResultResponse(recorded=False)
    return RecordResultResponse(recorded=True, chunk=ChunkResponse.from_chunk(chunk))


@router.get("/api/transcripts/results", response_model=list[ChunkResponse])
async def list_results(relay: Relay = Depends(get_relay)) -> list[ChunkResponse]:
    """List every result recorded in the current session, oldest first."""
    return [ChunkResponse.from_chunk(chunk) for chunk in relay.session.results()]


@router.delete("/api/transcripts/results", status_code=status.HTTP_204_NO_CONTENT)
async def clear_results(relay: Relay = Depends(get_relay)) -> None:
    relay.session.clear_results()
