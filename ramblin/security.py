"""
API Security Module
====================
Optional shared-secret check for incoming requests.

When SERVICE_API_KEY is configured, JSON endpoints require a matching
X-API-Key header and answer 401 otherwise. When it is empty the API is
open, which is how the dashboard runs in local development.
"""

from fastapi import Header, HTTPException

from ramblin import config


def verify_api_key(x_api_key: str = Header(default="")) -> str | None:
    """
    Validate the X-API-Key header against the configured service key.

    Args:
        x_api_key: API key from X-API-Key header

    Returns:
        The API key string if valid (None when no key is configured)

    Raises:
        HTTPException: 401 if a key is configured and the header does not match
    """
    if not config.SERVICE_API_KEY:
        return None
    if x_api_key != config.SERVICE_API_KEY:
        raise HTTPException(status_code=401, detail="Invalid API key")
    return x_api_key
