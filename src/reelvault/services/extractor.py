"""Title page extraction from embedded linked data.

IMDb title pages embed a schema.org description of the title in a
``<script type="application/ld+json">`` block. :class:`LinkedDataExtractor`
reads that block and maps it onto raw Title fields, which the hydration
engine then turns into entities.
"""

from __future__ import annotations

import html
import logging
import re
from collections.abc import Mapping
from typing import Any
from urllib.parse import urljoin

import orjson
from bs4 import BeautifulSoup

from reelvault.core.entities import Person
from reelvault.shared.constants import IMDbConfig
from reelvault.shared.errors import DomainError, ErrorCode, ErrorContext

logger = logging.getLogger(__name__)

_TITLE_TYPES = ("Movie", "TVSeries", "TVEpisode", "VideoGame", "CreativeWork")
_SERIES_TYPES = ("TVSeries",)
_PERSON_ID = re.compile(r"(nm\d{7,8})")
_DURATION = re.compile(r"^PT(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?")


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _duration_minutes(value: str | None) -> int | None:
    if not value:
        return None
    match = _DURATION.match(value)
    if not match or not (match.group("hours") or match.group("minutes")):
        return None
    return int(match.group("hours") or 0) * 60 + int(match.group("minutes") or 0)


def _year(value: str | None) -> int | None:
    if value and len(value) >= 4 and value[:4].isdigit():
        return int(value[:4])
    return None


class LinkedDataExtractor:
    """Extract raw Title fields from a title page.

    Args:
        base_url: Used to absolutise relative links found in the page.
    """

    def __init__(self, base_url: str = IMDbConfig.BASE_URL) -> None:
        self.base_url = base_url

    def _link(self, url: str | None) -> str | None:
        return urljoin(self.base_url, url) if url else None

    def _linked_data(self, document: str) -> dict[str, Any] | None:
        soup = BeautifulSoup(document, "html.parser")
        for script in soup.select('script[type="application/ld+json"]'):
            text = script.string or script.get_text()
            try:
                data = orjson.loads(str(text))
            except orjson.JSONDecodeError:
                logger.debug("Skipping malformed ld+json block")
                continue
            for candidate in _as_list(data):
                if isinstance(candidate, dict) and candidate.get("@type") in _TITLE_TYPES:
                    return candidate
        return None

    def _person(self, raw: Mapping[str, Any], person_type: str) -> dict[str, Any]:
        link = self._link(raw.get("url"))
        match = _PERSON_ID.search(link or "")
        return {
            "type": person_type,
            "id": match.group(1) if match else None,
            "name": html.unescape(raw.get("name") or "") or None,
            "link": link,
        }

    def extract(self, document: str, imdb_id: str) -> dict[str, Any]:
        """Map the page's linked data onto raw Title fields.

        Raises:
            DomainError: If the page carries no usable linked data.
        """
        data = self._linked_data(document)
        if data is None:
            raise DomainError(
                ErrorCode.PARSING_ERROR,
                f"No linked data found on title page for {imdb_id}",
                ErrorContext(operation="extract", additional_data={"imdb_id": imdb_id}),
            )

        rating = data.get("aggregateRating") or {}
        trailer = data.get("trailer") or {}
        name = html.unescape(data.get("name") or "") or None

        actors = [
            self._person(raw, Person.TYPE_ACTOR)
            for raw in _as_list(data.get("actor"))
            if isinstance(raw, dict)
        ]
        credits = [
            {"role": role, "involvement": None, "person": self._person(raw, role)}
            for role, key in ((Person.TYPE_DIRECTOR, "director"), (Person.TYPE_WRITER, "creator"))
            for raw in _as_list(data.get(key))
            if isinstance(raw, dict) and raw.get("@type") == "Person"
        ]

        raw_title: dict[str, Any] = {
            "id": imdb_id,
            "isTvSeries": data.get("@type") in _SERIES_TYPES,
            "link": self._link(data.get("url")),
            "title": name,
            "originalTitle": html.unescape(data.get("alternateName") or "") or name,
            "year": _year(data.get("datePublished")),
            "length": _duration_minutes(data.get("duration")),
            "rating": float(rating["ratingValue"]) if rating.get("ratingValue") is not None else None,
            "ratingVotes": int(rating["ratingCount"]) if rating.get("ratingCount") is not None else None,
            "genres": [html.unescape(genre) for genre in _as_list(data.get("genre"))],
            "posterUrl": data.get("image"),
            "trailerUrl": trailer.get("embedUrl") or trailer.get("url") if isinstance(trailer, dict) else None,
            "plot": html.unescape(data.get("description") or "") or None,
            "actors": actors or None,
            "credits": credits,
            "metadata": {
                key: data[key]
                for key in ("contentRating", "keywords", "datePublished")
                if data.get(key) is not None
            },
        }
        return raw_title


__all__ = ["LinkedDataExtractor"]
