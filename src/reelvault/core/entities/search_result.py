"""Search candidate record."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from reelvault.core.entities.base import Entity
from reelvault.shared.constants import TitleCategory


@dataclass
class SearchResult(Entity):
    """One entry returned by the suggestion endpoint."""

    id: str | None = None
    title: str | None = None
    image: str | None = None
    year: int | None = None
    type: str | None = None
    category: str | None = None
    starring: str | None = None
    rank: Any = None

    def is_movie(self) -> bool:
        return self.category == TitleCategory.MOVIE

    def is_tv_series(self) -> bool:
        return self.category in TitleCategory.SERIES

    @property
    def label(self) -> str:
        """``"title (year)"`` rendering used in ambiguity reports."""
        return f"{self.title} ({self.year})"
