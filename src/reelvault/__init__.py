"""
ReelVault - IMDb title resolution, hydration and caching

Turns loosely structured IMDb records into typed entities, narrows free-text
queries to a single identifier and keeps hydrated titles in a compressed,
self-pruning file cache.
"""

__version__ = "0.1.0"

from .core.collection import Collection
from .core.entities import (
    Credit,
    Entity,
    Episode,
    Person,
    Reference,
    SearchResult,
    Season,
    Title,
    hydrate,
)
from .services.imdb_client import ImdbClient

__all__ = [
    "Collection",
    "Credit",
    "Entity",
    "Episode",
    "ImdbClient",
    "Person",
    "Reference",
    "SearchResult",
    "Season",
    "Title",
    "hydrate",
]
