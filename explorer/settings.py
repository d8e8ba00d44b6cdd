"""
Central configuration for the book explorer.

Values can be overridden with ``EXPLORER_``-prefixed environment
variables or a ``.env`` file, e.g. ``EXPLORER_FETCH_CAP=80``. Use
``get_settings()`` to obtain the shared instance; components that need
configuration take a ``Settings`` argument so tests can pass their own.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings for the catalogue transport and the explorer sessions."""

    # ---------- Catalogue transport ----------
    api_base_url: str = "https://www.googleapis.com/books/v1/volumes"
    api_key: Optional[str] = None
    request_timeout: float = 10.0
    # Hard ceiling imposed by Google Books on ``maxResults``
    max_results_per_call: int = Field(default=40, ge=1, le=40)

    # ---------- Search behaviour ----------
    fetch_cap: int = Field(default=50, gt=0)
    page_size: int = Field(default=5, gt=0)
    # Applied when the query carries no language directive; empty disables it
    default_language: Optional[str] = "fr"
    initial_query: str = "lecture immersive"

    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="EXPLORER_", env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()
