"""API key authentication via the X-API-Key header."""

import secrets

from fastapi import HTTPException, Security, status
from fastapi.security import APIKeyHeader

from lablens.config import settings

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


async def verify_api_key(api_key: str | None = Security(api_key_header)) -> str:
    """Validate the X-API-Key header against the configured key.

    Returns:
        The validated API key.

    Raises:
        HTTPException: 401 if the key is missing or does not match.
    """
    if not api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing API key",
        )

    if not secrets.compare_digest(api_key, settings.api_key):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key",
        )

    return api_key
