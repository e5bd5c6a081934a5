"""Result model for one live transcription session.

The speech engine reports interim and final recognitions, typically from its
own threads. ``TranscriptSession`` turns each report into a
``TranscriptChunk``, keeps the session's results, notifies subscribers (for
example a live caption view) and forwards final chunks for enrichment.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import datetime

from transcript_relay.enrichment.models import UNKNOWN_SPEAKER, TranscriptChunk, utcnow

logger = logging.getLogger(__name__)

ChunkListener = Callable[[TranscriptChunk], None]


class TranscriptSession:
    def __init__(
        self,
        on_final: ChunkListener | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._on_final = on_final
        self._clock = clock
        self._lock = threading.Lock()
        self._results: list[TranscriptChunk] = []
        self._listeners: list[ChunkListener] = []

    def handle_result(
        self,
        text: str,
        speaker_tag: str | None,
        is_final: bool,
        timestamp: datetime | None = None,
    ) -> TranscriptChunk | None:
        """Record one recognition result.

        Blank text is ignored and returns None. Otherwise the recorded chunk
        is returned; final chunks are also passed to ``on_final``.
        """
        if not text or not text.strip():
            return None

        chunk = TranscriptChunk(
            text=text,
            speaker_tag=speaker_tag or UNKNOWN_SPEAKER,
            is_final=is_final,
            timestamp=timestamp or self._clock(),
        )
        with self._lock:
            self._results.append(chunk)
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(chunk)
            except Exception:
                logger.exception("Transcript listener failed")

        if chunk.is_final and self._on_final is not None:
            self._on_final(chunk)
        return chunk

    def subscribe(self, listener: ChunkListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def unsubscribe(self, listener: ChunkListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def results(self) -> list[TranscriptChunk]:
        with self._lock:
            return list(self._results)

    def clear_results(self) -> None:
        with self._lock:
            self._results.clear()
