from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from transcript_relay.api.routes.keypoints import router as keypoints_router
from transcript_relay.api.routes.speakers import router as speakers_router
from transcript_relay.api.routes.transcripts import router as transcripts_router
from transcript_relay.config import configure_logging, settings
from transcript_relay.relay import Relay, build_relay


def create_app(relay: Relay | None = None) -> FastAPI:
    """Build the API; a prebuilt ``relay`` skips construction from settings."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging(settings.log_level)
        app.state.relay = relay if relay is not None else build_relay(settings)
        await app.state.relay.dispatcher.start()
        try:
            yield
        finally:
            await app.state.relay.dispatcher.stop()

    app = FastAPI(
        title="Transcript Relay API",
        description="Live meeting transcript enrichment: key points and speaker identities",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000"],
        allow_origin_regex=r"http://localhost:\d+",
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(transcripts_router)
    app.include_router(keypoints_router)
    app.include_router(speakers_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "healthy"}

    return app


app = create_app()


def serve() -> None:
    """Run the API with uvicorn using the configured host and port."""
    import uvicorn

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
