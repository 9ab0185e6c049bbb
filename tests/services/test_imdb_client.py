"""Tests for the IMDb client facade."""

from __future__ import annotations

from typing import Any

import orjson
import pytest

from reelvault.config import Settings
from reelvault.core.entities import SearchResult, Title
from reelvault.services.cache import FileCache
from reelvault.services.imdb_client import ImdbClient, suggestion_to_raw
from reelvault.shared.errors import (
    BadInputError,
    ErrorCode,
    MultipleSearchResultsError,
    NoSearchResultsError,
)

SUGGESTIONS = {
    "d": [
        {
            "i": {"height": 1, "imageUrl": "https://m.media-amazon.com/room.jpg", "width": 1},
            "id": "tt0368226",
            "l": "The Room",
            "q": "feature",
            "qid": "movie",
            "rank": 2107,
            "s": "Tommy Wiseau, Greg Sestero",
            "y": 2003,
        },
        {"id": "tt3170832", "l": "Room", "q": "feature", "qid": "movie", "y": 2015},
        {"id": "tt9999999", "l": "The Room", "q": "TV series", "qid": "tvSeries", "y": 2019},
    ],
    "q": "the room",
    "v": 1,
}


class FakeFetcher:
    """In-memory fetcher keyed by URL."""

    def __init__(self, pages: dict[str, str] | None = None, suggestions: Any = SUGGESTIONS) -> None:
        self.pages = pages or {}
        self.suggestions = suggestions
        self.requested: list[str] = []

    def suggestion_url(self, query: str) -> str:
        return f"suggest:{query}"

    def title_url(self, imdb_id: str) -> str:
        return f"https://www.imdb.com/title/{imdb_id}/"

    def fetch_text(self, url: str) -> str:
        self.requested.append(url)
        if url.startswith("suggest:"):
            if isinstance(self.suggestions, str):
                return self.suggestions
            return orjson.dumps(self.suggestions).decode()
        return self.pages.get(url, "")


class FakeExtractor:
    def __init__(self) -> None:
        self.calls = 0

    def extract(self, document: str, imdb_id: str) -> dict[str, Any]:
        self.calls += 1
        return {"title": document, "genres": ["Drama"], "actors": [{"id": "nm1", "name": "Tommy"}]}


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher(pages={"https://www.imdb.com/title/tt0368226/": "The Room"})


@pytest.fixture
def extractor() -> FakeExtractor:
    return FakeExtractor()


@pytest.fixture
def client(settings: Settings, fetcher: FakeFetcher, extractor: FakeExtractor) -> ImdbClient:
    return ImdbClient(settings, fetcher=fetcher, extractor=extractor)


class TestSearch:
    def test_suggestions_are_mapped_to_search_results(self, client: ImdbClient) -> None:
        results = client.search("The Room")

        assert results.count() == 3
        first = results.first()
        assert isinstance(first, SearchResult)
        assert first.id == "tt0368226"
        assert first.title == "The Room"
        assert first.image == "https://m.media-amazon.com/room.jpg"
        assert first.year == 2003
        assert first.category == "movie"
        assert first.starring == "Tommy Wiseau, Greg Sestero"
        assert first.rank == 2107

    def test_query_is_url_encoded_once(self, client: ImdbClient, fetcher: FakeFetcher) -> None:
        client.search("The%20Room")

        assert fetcher.requested == ["suggest:The%20Room"]

    def test_missing_keys_become_none(self) -> None:
        raw = suggestion_to_raw({"id": "tt1", "l": "", "y": "n/a"})

        assert raw["title"] is None
        assert raw["year"] is None
        assert raw["image"] is None

    @pytest.mark.parametrize("payload", ["", "{not json", {"d": "oops"}, {"q": "x"}])
    def test_unusable_payload_gives_empty_collection(self, settings: Settings, payload: Any) -> None:
        client = ImdbClient(settings, fetcher=FakeFetcher(suggestions=payload))

        assert client.search("anything").count() == 0


class TestResolution:
    def test_resolve_by_title(self, client: ImdbClient) -> None:
        assert client.resolve_by_title("The Room", "movie") == "tt0368226"

    def test_resolve_by_title_and_year(self, client: ImdbClient) -> None:
        assert client.resolve_by_title("Room", "movie", year=2014) == "tt3170832"

    def test_empty_search_raises(self, settings: Settings) -> None:
        client = ImdbClient(settings, fetcher=FakeFetcher(suggestions={"d": []}))

        assert client.search("zzz").count() == 0
        with pytest.raises(NoSearchResultsError):
            client.resolve_by_title("zzz", "movie")

    def test_movie_takes_first_movie(self, client: ImdbClient) -> None:
        title = client.movie("Roomy")

        assert title.id == "tt0368226"
        assert title.title == "The Room"

    def test_tv_series_by_year(self, client: ImdbClient, fetcher: FakeFetcher) -> None:
        fetcher.pages["https://www.imdb.com/title/tt9999999/"] = "The Room (series)"

        assert client.tv_series_by_year("The Room", 2020).title == "The Room (series)"

    def test_movie_by_year_ambiguous(self, settings: Settings) -> None:
        suggestions = {
            "d": [
                {"id": "tt0000001", "l": "Dune", "qid": "movie", "y": 2021},
                {"id": "tt0000002", "l": "Dune: Part Two", "qid": "movie", "y": 2022},
            ],
        }
        client = ImdbClient(settings, fetcher=FakeFetcher(suggestions=suggestions))

        with pytest.raises(MultipleSearchResultsError):
            client.movie_by_year("Dune", 2021)

    def test_unconfident_match_raises_no_results(self, client: ImdbClient) -> None:
        with pytest.raises(NoSearchResultsError):
            client._resolve_and_lookup("Completely unrelated words", "movie")


class TestLookup:
    @pytest.mark.parametrize("imdb_id", ["tt123", "nm0368226", "tt0368226x", "TT0368226"])
    def test_invalid_identifier(self, client: ImdbClient, imdb_id: str) -> None:
        with pytest.raises(BadInputError) as exc_info:
            client.lookup_by_identifier(imdb_id)

        assert exc_info.value.code == ErrorCode.INVALID_IDENTIFIER

    def test_lookup_hydrates_and_fills_identity(self, client: ImdbClient) -> None:
        title = client.lookup_by_identifier("tt0368226")

        assert isinstance(title, Title)
        assert title.id == "tt0368226"
        assert title.link == "https://www.imdb.com/title/tt0368226/"
        assert title.actors["nm1"].name == "Tommy"

    def test_second_lookup_is_served_from_cache(
        self,
        client: ImdbClient,
        fetcher: FakeFetcher,
        extractor: FakeExtractor,
    ) -> None:
        first = client.lookup_by_identifier("tt0368226")
        second = client.lookup_by_identifier("tt0368226")

        assert second == first
        assert extractor.calls == 1
        assert fetcher.requested.count("https://www.imdb.com/title/tt0368226/") == 1

    def test_cache_is_shared_across_clients(
        self,
        settings: Settings,
        fetcher: FakeFetcher,
        extractor: FakeExtractor,
    ) -> None:
        ImdbClient(settings, fetcher=fetcher, extractor=extractor).lookup_by_identifier("tt0368226")
        ImdbClient(settings, fetcher=fetcher, extractor=extractor).lookup_by_identifier("tt0368226")

        assert extractor.calls == 1

    def test_disabled_cache_always_fetches(
        self,
        settings: Settings,
        fetcher: FakeFetcher,
        extractor: FakeExtractor,
    ) -> None:
        settings.cache.enabled = False
        client = ImdbClient(settings, fetcher=fetcher, extractor=extractor)

        client.lookup_by_identifier("tt0368226")
        client.lookup_by_identifier("tt0368226")

        assert client.cache is None
        assert extractor.calls == 2

    def test_non_title_cache_value_is_refetched(
        self,
        file_cache: FileCache,
        fetcher: FakeFetcher,
        extractor: FakeExtractor,
    ) -> None:
        file_cache.add("tt0368226", {"stale": True})
        client = ImdbClient(fetcher=fetcher, extractor=extractor, cache=file_cache)

        title = client.lookup_by_identifier("tt0368226")

        assert title.title == "The Room"
        assert isinstance(file_cache.get("tt0368226"), Title)

    def test_new_builds_a_client(self, settings: Settings, fetcher: FakeFetcher) -> None:
        assert isinstance(ImdbClient.new(settings, fetcher=fetcher), ImdbClient)
