"""Title and Reference records."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar

from reelvault.core.collection import Collection
from reelvault.core.entities.base import Entity


@dataclass
class Reference(Entity):
    """Lightweight pointer to another title (e.g. "more like this")."""

    id: str | None = None
    title: str | None = None
    link: str | None = None


@dataclass
class Title(Entity):
    """A movie or TV series page, fully hydrated.

    ``seasons`` holds one nested Collection of :class:`Episode` per season
    key. ``actors``, ``similars`` and ``credits`` hold flat Collections.
    """

    CASTS: ClassVar[dict[str, str]] = {
        "actors": "Person",
        "similars": "Reference",
        "seasons": "Episode",
        "credits": "Credit",
    }

    id: str | None = None
    is_tv_series: bool = False
    link: str | None = None
    title: str | None = None
    original_title: str | None = None
    year: int | None = None
    length: int | None = None
    rating: float | None = None
    rating_votes: int | None = None
    popularity_score: int | None = None
    meta_score: int | None = None
    genres: list[str] = field(default_factory=list)
    poster_url: str | None = None
    trailer_url: str | None = None
    plot: str | None = None
    actors: Collection[Any] | None = None
    similars: Collection[Any] | None = None
    season_refs: list[Any] = field(default_factory=list)
    seasons: Collection[Any] = field(default_factory=Collection)
    credits: Collection[Any] = field(default_factory=Collection)
    metadata: dict[str, Any] = field(default_factory=dict)
