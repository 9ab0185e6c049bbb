"""IMDb client facade.

Wires the pieces together: a free-text query is narrowed to an identifier by
:class:`~reelvault.core.resolution.TitleResolver`, the identifier is looked up
in the cache, and on a miss the title page is fetched, extracted, hydrated
into a :class:`~reelvault.core.entities.Title` and cached.
"""

from __future__ import annotations

import logging
import re
import time
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote, unquote

import orjson

from reelvault.config.models.settings import Settings
from reelvault.core.collection import Collection
from reelvault.core.entities import SearchResult, Title
from reelvault.core.resolution import TitleResolver
from reelvault.services.cache import FileCache
from reelvault.services.extractor import LinkedDataExtractor
from reelvault.services.fetcher import HttpFetcher
from reelvault.shared.constants import IMDbConfig, SuggestionKeys, TitleCategory
from reelvault.shared.errors import (
    ErrorCode,
    NoSearchResultsError,
    create_bad_input_error,
)
from reelvault.shared.logging import log_operation_start, log_operation_success
from reelvault.shared.protocols import CacheProtocol, ExtractorProtocol, FetcherProtocol

logger = logging.getLogger(__name__)

_TITLE_ID = re.compile(IMDbConfig.TITLE_ID_PATTERN)


def _present(item: Mapping[str, Any], key: str) -> Any:
    value = item.get(key)
    return value if value else None


def _as_year(value: Any) -> int | None:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def suggestion_to_raw(item: Mapping[str, Any]) -> dict[str, Any]:
    """Map one suggestion endpoint entry onto raw SearchResult fields."""
    image = item.get(SuggestionKeys.IMAGE)
    return {
        "id": _present(item, SuggestionKeys.ID),
        "title": _present(item, SuggestionKeys.TITLE),
        "image": _present(image, SuggestionKeys.IMAGE_URL) if isinstance(image, Mapping) else None,
        "year": _as_year(_present(item, SuggestionKeys.YEAR)),
        "type": _present(item, SuggestionKeys.TYPE),
        "category": _present(item, SuggestionKeys.CATEGORY),
        "starring": _present(item, SuggestionKeys.STARRING),
        "rank": _present(item, SuggestionKeys.RANK),
    }


class ImdbClient:
    """Search, resolve and look up IMDb titles.

    Args:
        settings: Configuration; defaults to ``Settings()``.
        fetcher: Document fetcher; defaults to :class:`HttpFetcher`.
        extractor: Title page extractor; defaults to :class:`LinkedDataExtractor`.
        cache: Cache for hydrated titles. When omitted, a :class:`FileCache`
            is created if ``settings.cache.enabled`` is true.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        fetcher: FetcherProtocol | None = None,
        extractor: ExtractorProtocol | None = None,
        cache: CacheProtocol | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.fetcher = fetcher or HttpFetcher(self.settings.http)
        self.extractor = extractor or LinkedDataExtractor(self.settings.http.base_url)
        if cache is None and self.settings.cache.enabled:
            cache = FileCache(self.settings.cache.directory, self.settings.cache.ttl)
        self.cache = cache
        self.resolver = TitleResolver(self.search)

    @classmethod
    def new(cls, settings: Settings | None = None, **collaborators: Any) -> ImdbClient:
        """Static constructor, equivalent to ``ImdbClient(settings, ...)``."""
        return cls(settings, **collaborators)

    # ------------------------------------------------------------------
    # Search and resolution
    # ------------------------------------------------------------------

    def search(self, query: str) -> Collection[SearchResult]:
        """Query the suggestion endpoint.

        Malformed or unexpected payloads yield an empty Collection; transport
        failures propagate as NetworkError.
        """
        keyword = quote(unquote(query), safe="")
        payload = self.fetcher.fetch_text(self.fetcher.suggestion_url(keyword))

        try:
            data = orjson.loads(payload) if payload else None
        except orjson.JSONDecodeError:
            logger.debug("Malformed search payload for '%s'", query)
            return Collection()

        if not isinstance(data, dict) or not isinstance(data.get(SuggestionKeys.RESULTS), list):
            return Collection()

        return Collection(
            SearchResult.from_dict(suggestion_to_raw(item))
            for item in data[SuggestionKeys.RESULTS]
            if isinstance(item, Mapping)
        )

    def resolve_by_title(self, query: str, category: str, year: int | None = None) -> str | None:
        """Identifier the query most plausibly refers to, or None when unsure."""
        return self.resolver.narrow(query, category, year=year)

    def _resolve_and_lookup(
        self,
        query: str,
        category: str,
        *,
        force_first: bool = False,
        year: int | None = None,
    ) -> Title:
        imdb_id = self.resolver.narrow(query, category, force_first=force_first, year=year)
        if imdb_id is None:
            raise NoSearchResultsError(query)
        return self.lookup_by_identifier(imdb_id)

    def movie(self, title: str) -> Title:
        """Best-effort: the first movie the search returns."""
        return self._resolve_and_lookup(title, TitleCategory.MOVIE, force_first=True)

    def movie_by_year(self, title: str, year: int) -> Title:
        return self._resolve_and_lookup(title, TitleCategory.MOVIE, year=year)

    def tv_series(self, title: str) -> Title:
        """Best-effort: the first TV series the search returns."""
        return self._resolve_and_lookup(title, TitleCategory.TV_SERIES, force_first=True)

    def tv_series_by_year(self, title: str, year: int) -> Title:
        return self._resolve_and_lookup(title, TitleCategory.TV_SERIES, year=year)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def lookup_by_identifier(self, imdb_id: str) -> Title:
        """Hydrated Title for ``imdb_id``, served from the cache when possible.

        Raises:
            BadInputError: If ``imdb_id`` is not ``tt`` followed by 7 or 8 digits.
            NetworkError: If the title page cannot be fetched.
        """
        if not isinstance(imdb_id, str) or not _TITLE_ID.match(imdb_id):
            raise create_bad_input_error(
                f"Invalid IMDb ID: {imdb_id}",
                code=ErrorCode.INVALID_IDENTIFIER,
                value=str(imdb_id),
                operation="lookup_by_identifier",
            )

        if self.cache is not None and self.cache.has(imdb_id):
            cached = self.cache.get(imdb_id)
            if isinstance(cached, Title):
                logger.debug("Cache hit for %s", imdb_id)
                return cached

        start = time.perf_counter()
        log_operation_start(logger, "lookup_by_identifier", {"imdb_id": imdb_id})

        url = self.fetcher.title_url(imdb_id)
        document = self.fetcher.fetch_text(url)
        title = Title.from_dict(self.extractor.extract(document, imdb_id))
        if not title.id:
            title.id = imdb_id
        if not title.link:
            title.link = url

        if self.cache is not None:
            self.cache.add(imdb_id, title)

        log_operation_success(
            logger,
            "lookup_by_identifier",
            (time.perf_counter() - start) * 1000,
            result_info={"title": title.title or "", "cached": self.cache is not None},
        )
        return title


__all__ = ["ImdbClient", "suggestion_to_raw"]
