"""API key guard for the yardage service."""

from __future__ import annotations

import os

from fastapi import Header, HTTPException, status


def require_api_key(
    x_api_key: str | None = Header(default=None, alias="x-api-key"),
) -> str | None:
    """Require a matching ``x-api-key`` header when ``REQUIRE_API_KEY=1``."""

    if os.getenv("REQUIRE_API_KEY", "0") != "1":
        return x_api_key

    expected = os.getenv("API_KEY")
    if not expected or x_api_key != expected:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="invalid api key",
        )
    return x_api_key
