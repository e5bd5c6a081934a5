"""Supabase storage for key points and speaker identities.

The Supabase client is synchronous, so every call runs in a worker thread to
keep the event loop free while the pipelines hold their locks.
"""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Any, cast

from supabase import Client, create_client

from transcript_relay.config import Settings
from transcript_relay.enrichment.models import KeypointItem, SpeakerIdentity, utcnow


def get_supabase_client(settings: Settings) -> Client:
    """Create and return a Supabase client from settings."""
    return create_client(settings.supabase_url, settings.supabase_key)


def _parse_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def keypoint_to_row(item: KeypointItem) -> dict[str, object]:
    return {
        "timestamp": item.timestamp.isoformat(),
        "speaker_tag": item.speaker_tag,
        "is_action_item": item.is_action_item,
        "text": item.text,
        "suggested_by": item.suggested_by,
        "needs_follow_up": item.needs_follow_up,
    }


def keypoint_from_row(row: dict[str, Any]) -> KeypointItem:
    return KeypointItem(
        timestamp=_parse_datetime(row["timestamp"]),
        speaker_tag=row.get("speaker_tag") or "",
        is_action_item=bool(row.get("is_action_item")),
        text=row["text"],
        suggested_by=row.get("suggested_by") or "",
        needs_follow_up=bool(row.get("needs_follow_up")),
    )


def speaker_from_row(row: dict[str, Any]) -> SpeakerIdentity:
    return SpeakerIdentity(
        speaker_tag=row["speaker_tag"],
        display_name=row.get("display_name") or "",
        job_title=row.get("job_title") or "",
        last_updated_utc=_parse_datetime(row["last_updated_utc"]),
    )


class SupabaseKeypointLog:
    """Key-point log stored in a Supabase table (one row per item)."""

    def __init__(self, client: Client, table: str = "keypoints") -> None:
        self._client = client
        self._table = table

    async def add(self, item: KeypointItem) -> None:
        await asyncio.to_thread(self._insert, keypoint_to_row(item))

    async def get_recent(self, count: int = 50) -> list[KeypointItem]:
        rows = await asyncio.to_thread(self._select_recent, count)
        return [keypoint_from_row(row) for row in rows]

    def _insert(self, row: dict[str, object]) -> None:
        self._client.table(self._table).insert(row).execute()

    def _select_recent(self, count: int) -> list[dict[str, Any]]:
        result = (
            self._client.table(self._table)
            .select("*")
            .order("timestamp", desc=True)
            .limit(count)
            .execute()
        )
        # Supabase .data is typed as JSON (broad union); cast to concrete type.
        return cast(list[dict[str, Any]], result.data)


class SupabaseSpeakerDirectory:
    """Speaker directory stored in a Supabase table with a unique speaker_tag."""

    def __init__(self, client: Client, table: str = "speakers") -> None:
        self._client = client
        self._table = table

    async def upsert(self, speaker_tag: str, display_name: str, job_title: str) -> None:
        row = {
            "speaker_tag": speaker_tag,
            "display_name": display_name,
            "job_title": job_title,
            "last_updated_utc": utcnow().isoformat(),
        }
        await asyncio.to_thread(self._upsert, row)

    async def get_by_speaker_tag(self, speaker_tag: str) -> SpeakerIdentity | None:
        rows = await asyncio.to_thread(self._select_one, speaker_tag)
        if not rows:
            return None
        return speaker_from_row(rows[0])

    def _upsert(self, row: dict[str, object]) -> None:
        self._client.table(self._table).upsert(row, on_conflict="speaker_tag").execute()

    def _select_one(self, speaker_tag: str) -> list[dict[str, Any]]:
        result = (
            self._client.table(self._table)
            .select("*")
            .eq("speaker_tag", speaker_tag)
            .limit(1)
            .execute()
        )
        return cast(list[dict[str, Any]], result.data)
