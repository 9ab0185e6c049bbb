"""Service protocols for dependency inversion.

The client facade only talks to these interfaces, so tests and callers can
swap the HTTP layer, the markup extractor or the cache.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol


class FetcherProtocol(Protocol):
    """Retrieves remote documents.

    Implementations raise :class:`~reelvault.shared.errors.NetworkError` on
    transport failure.
    """

    def fetch_text(self, url: str) -> str:
        """Return the body of ``url`` as text."""

    def suggestion_url(self, query: str) -> str:
        """URL of the search endpoint for an already-encoded ``query``."""

    def title_url(self, imdb_id: str) -> str:
        """URL of the title page for ``imdb_id``."""


class ExtractorProtocol(Protocol):
    """Turns a fetched title page into a raw Title mapping."""

    def extract(self, document: str, imdb_id: str) -> Mapping[str, Any]:
        """Return raw Title fields (camelCase or snake_case keys)."""


class CacheProtocol(Protocol):
    def has(self, key: str) -> bool: ...

    def get(self, key: str, default: Any = None) -> Any: ...

    def add(self, key: str, value: Any, ttl: int | None = None) -> bool: ...
