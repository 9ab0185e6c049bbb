"""Cache configuration model."""

from __future__ import annotations

from pydantic import BaseModel, Field

from reelvault.shared.constants import Cache


class CacheSettings(BaseModel):
    """Cache configuration.

    Controls whether looked-up titles are persisted, where the cache files
    live and how long entries stay valid.
    """

    enabled: bool = Field(default=True, description="Enable the title cache")
    directory: str = Field(
        default=f".reelvault/{Cache.DEFAULT_DIR}",
        description="Directory holding the .cache files",
    )
    ttl: int = Field(
        default=Cache.DEFAULT_TTL,
        gt=0,
        description="Default time-to-live in seconds, also the pruning age",
    )


__all__ = ["CacheSettings"]
