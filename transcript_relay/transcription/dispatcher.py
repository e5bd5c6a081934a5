"""Bounded channel carrying final chunks from the transcription source to the orchestrator."""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from transcript_relay.enrichment.models import TranscriptChunk
from transcript_relay.pipeline_config import DispatchConfig

logger = logging.getLogger(__name__)


class ChunkProcessor(Protocol):
    async def process(self, chunk: TranscriptChunk) -> None: ...


class ChunkDispatcher:
    """Queue chunks and hand them to the orchestrator from worker tasks.

    Recognition callbacks usually fire on SDK threads, so ``submit_threadsafe``
    schedules the enqueue on the dispatcher's loop. When the queue is full the
    chunk is dropped and logged rather than stalling the source.
    """

    def __init__(self, processor: ChunkProcessor, config: DispatchConfig | None = None) -> None:
        self._processor = processor
        self._config = config or DispatchConfig()
        self._queue: asyncio.Queue[TranscriptChunk] = asyncio.Queue(maxsize=self._config.queue_size)
        self._workers: list[asyncio.Task[None]] = []
        self._loop: asyncio.AbstractEventLoop | None = None
        self.dropped = 0

    @property
    def running(self) -> bool:
        return bool(self._workers)

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    async def start(self) -> None:
        if self._workers:
            return
        self._loop = asyncio.get_running_loop()
        self._workers = [
            asyncio.create_task(self._run(), name=f"chunk-dispatcher-{index}")
            for index in range(max(1, self._config.workers))
        ]
        logger.info("Chunk dispatcher started with %d workers", len(self._workers))

    async def stop(self) -> None:
        workers, self._workers = self._workers, []
        for worker in workers:
            worker.cancel()
        await asyncio.gather(*workers, return_exceptions=True)
        if workers:
            logger.info("Chunk dispatcher stopped (%d chunks pending)", self._queue.qsize())

    async def submit(self, chunk: TranscriptChunk) -> None:
        """Enqueue a chunk, waiting for space when the queue is full."""
        await self._queue.put(chunk)

    def submit_threadsafe(self, chunk: TranscriptChunk) -> None:
        """Enqueue a chunk from any thread."""
        if self._loop is None:
            raise RuntimeError("ChunkDispatcher.start() must be awaited before submitting chunks.")
        self._loop.call_soon_threadsafe(self._enqueue_nowait, chunk)

    async def join(self) -> None:
        """Wait until every queued chunk has been processed."""
        await self._queue.join()

    def _enqueue_nowait(self, chunk: TranscriptChunk) -> None:
        try:
            self._queue.put_nowait(chunk)
        except asyncio.QueueFull:
            self.dropped += 1
            logger.warning(
                "Dispatch queue full, dropping chunk from %s (%d dropped)",
                chunk.speaker_tag,
                self.dropped,
            )

    async def _run(self) -> None:
        while True:
            chunk = await self._queue.get()
            try:
                await self._processor.process(chunk)
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Unexpected failure dispatching chunk from %s", chunk.speaker_tag)
            finally:
                self._queue.task_done()
