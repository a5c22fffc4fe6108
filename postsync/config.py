"""
postsync configuration — all environment variables in one place.

Read from environment at import time. Never hardcode tokens.
"""

from __future__ import annotations

import os


class Settings:
    """Client settings from environment variables."""

    # Server
    SERVER_URL: str = os.environ.get("POSTSYNC_SERVER_URL", "http://localhost:8065")
    API_PREFIX: str = "/api/v4"

    # Auth (session token issued by the server after login)
    TOKEN: str = os.environ.get("POSTSYNC_TOKEN", "")

    # Transport
    HTTP_TIMEOUT: float = float(os.environ.get("POSTSYNC_HTTP_TIMEOUT", "30.0"))

    # Paging
    POST_CHUNK_SIZE: int = int(os.environ.get("POSTSYNC_POST_CHUNK_SIZE", "60"))

    @property
    def API_URL(self) -> str:
        return f"{self.SERVER_URL.rstrip('/')}{self.API_PREFIX}"


# Singleton instance
settings = Settings()
