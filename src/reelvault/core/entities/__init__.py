"""Typed IMDb records and the hydration engine that builds them."""

from reelvault.core.entities.base import Entity, to_plain
from reelvault.core.entities.episodes import Episode, Season
from reelvault.core.entities.hydration import (
    GroupedRecords,
    SingleRecord,
    classify,
    hydrate,
)
from reelvault.core.entities.people import Credit, Person
from reelvault.core.entities.search_result import SearchResult
from reelvault.core.entities.title import Reference, Title

__all__ = [
    "Credit",
    "Entity",
    "Episode",
    "GroupedRecords",
    "Person",
    "Reference",
    "SearchResult",
    "Season",
    "SingleRecord",
    "Title",
    "classify",
    "hydrate",
    "to_plain",
]
