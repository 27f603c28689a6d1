"""Authentication — optional shared API key on inbound requests."""

from __future__ import annotations

import hmac

from fastapi import Header, HTTPException, Request

API_KEY_HEADER = "X-API-Key"


def validate_api_key(provided: str, expected: str) -> bool:
    """Constant-time API key comparison."""
    return hmac.compare_digest(provided.encode(), expected.encode())


async def require_api_key(request: Request, x_api_key: str = Header(default="")) -> None:
    """Reject the request unless the configured key matches. No key configured = open."""
    expected = request.app.state.config.relay_api_key
    if expected and not validate_api_key(x_api_key, expected):
        raise HTTPException(401, "Invalid API key")
