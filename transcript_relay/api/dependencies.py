from __future__ import annotations

from fastapi import Request

from transcript_relay.relay import Relay


def get_relay(request: Request) -> Relay:
    """Return the Relay created during application startup."""
    return request.app.state.relay
