"""Episode and Season records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from reelvault.core.collection import Collection
from reelvault.core.entities.base import Entity


@dataclass
class Episode(Entity):
    id: str | None = None
    img: str | None = None
    title: str | None = None
    link: str | None = None
    season_number: int | None = None
    episode_number: int | None = None
    air_date: str | None = None
    plot: str | None = None
    rating: float | None = None
    rating_votes: int | None = None


@dataclass
class Season(Entity):
    CASTS: ClassVar[dict[str, str]] = {"episodes": "Episode"}

    id: str | None = None
    number: int | None = None
    episodes: Collection[Any] | None = None
