"""API key validation for mutating endpoints."""

import os
from typing import Optional

from fastapi import HTTPException, Request, status

API_KEY_HEADER_NAME = "X-API-Key"


def get_api_key_from_env() -> Optional[str]:
    """Get API key from environment variable."""
    return os.getenv("API_KEY")


class APIKeyAuth:
    """Dependency for API key authentication.

    Authentication is disabled when API_KEY is unset.
    """

    def __init__(self, required: bool = True):
        self.required = required

    async def __call__(self, request: Request) -> bool:
        expected_key = get_api_key_from_env()
        if not expected_key or not self.required:
            return True

        api_key = request.headers.get(API_KEY_HEADER_NAME)
        if not api_key or api_key != expected_key:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or missing API key",
                headers={"WWW-Authenticate": "ApiKey"},
            )
        return True
