"""Wire settings, repositories, consumers, and the orchestrator into one Relay."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from transcript_relay.config import Settings
from transcript_relay.enrichment.consumers import ConsumerCatalog, build_consumer_catalog
from transcript_relay.enrichment.orchestrator import Orchestrator
from transcript_relay.pipeline_config import DispatchConfig, RepositoryBackend
from transcript_relay.storage.repositories import (
    InMemoryKeypointLog,
    InMemorySpeakerDirectory,
    KeypointLog,
    SpeakerDirectory,
)
from transcript_relay.transcription.dispatcher import ChunkDispatcher
from transcript_relay.transcription.session import TranscriptSession

logger = logging.getLogger(__name__)


@dataclass
class Relay:
    """Everything one running relay needs, shared by the API routes."""

    orchestrator: Orchestrator
    keypoints: KeypointLog
    speakers: SpeakerDirectory
    dispatcher: ChunkDispatcher
    session: TranscriptSession


def repository_backend(settings: Settings) -> RepositoryBackend:
    if settings.supabase_url and settings.supabase_key:
        return RepositoryBackend.SUPABASE
    return RepositoryBackend.MEMORY


def build_repositories(settings: Settings) -> tuple[KeypointLog, SpeakerDirectory]:
    if repository_backend(settings) is RepositoryBackend.SUPABASE:
        from transcript_relay.storage.supabase_store import (
            SupabaseKeypointLog,
            SupabaseSpeakerDirectory,
            get_supabase_client,
        )

        client = get_supabase_client(settings)
        return (
            SupabaseKeypointLog(client, settings.keypoints_table),
            SupabaseSpeakerDirectory(client, settings.speakers_table),
        )

    logger.info("Supabase not configured; key points and speakers are kept in memory")
    return InMemoryKeypointLog(), InMemorySpeakerDirectory()


def build_relay(
    settings: Settings,
    consumers: ConsumerCatalog | None = None,
    keypoints: KeypointLog | None = None,
    speakers: SpeakerDirectory | None = None,
) -> Relay:
    """Assemble a Relay; any collaborator passed in replaces the configured one."""
    if keypoints is None or speakers is None:
        default_keypoints, default_speakers = build_repositories(settings)
        if keypoints is None:
            keypoints = default_keypoints
        if speakers is None:
            speakers = default_speakers
    if consumers is None:
        consumers = build_consumer_catalog(settings)

    orchestrator = Orchestrator(consumers, keypoints, speakers)
    dispatcher = ChunkDispatcher(
        orchestrator,
        DispatchConfig(
            queue_size=settings.dispatch_queue_size,
            workers=settings.dispatch_workers,
        ),
    )
    session = TranscriptSession(on_final=dispatcher.submit_threadsafe)
    return Relay(
        orchestrator=orchestrator,
        keypoints=keypoints,
        speakers=speakers,
        dispatcher=dispatcher,
        session=session,
    )
