"""Narrow a free-text title query down to one IMDb identifier."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from reelvault.core.collection import Collection
from reelvault.core.resolution.scoring import confidence_for, is_confident, title_distance
from reelvault.shared.constants import MatchingConfig, TitleCategory
from reelvault.shared.errors import (
    ErrorCode,
    MultipleSearchResultsError,
    NoSearchResultsError,
    create_bad_input_error,
)

logger = logging.getLogger(__name__)

SearchFunction = Callable[[str], Collection[Any]]


class TitleResolver:
    """Pick the single candidate a query most plausibly refers to.

    Args:
        search: Callable returning a Collection of SearchResult candidates
            for a query, in the upstream ranking order.
    """

    def __init__(self, search: SearchFunction) -> None:
        self._search = search

    def narrow(
        self,
        query: str,
        category: str,
        force_first: bool = False,
        year: int | None = None,
    ) -> str | None:
        """Resolve ``query`` to an identifier.

        Steps: keep candidates of ``category``; with ``force_first`` take
        the first; with ``year`` keep a one-year window around it; otherwise
        keep the closest title by edit distance.

        Returns:
            The identifier, or None when the closest title is too far from
            the query to be trusted.

        Raises:
            BadInputError: If ``category`` is not ``movie`` or ``tvSeries``.
            NoSearchResultsError: If nothing is left to choose from.
            MultipleSearchResultsError: If several candidates survive.
        """
        if category not in TitleCategory.NARROWABLE:
            raise create_bad_input_error(
                f"Invalid category: {category}",
                code=ErrorCode.INVALID_CATEGORY,
                value=category,
                operation="narrow",
            )

        results = self._search(query)
        if results.count() == 0:
            raise NoSearchResultsError(query)

        results = results.filter(lambda result, _key: result.category == category)

        if force_first:
            first = results.first()
            if first is None:
                raise NoSearchResultsError(query)
            return first.id

        if year:
            window = range(year - MatchingConfig.YEAR_TOLERANCE, year + MatchingConfig.YEAR_TOLERANCE + 1)
            results = results.filter(lambda result, _key: result.year in window)
        elif results.count() > 0:
            best_id, best_distance = self._closest(query, results)
            if not is_confident(best_distance):
                logger.debug(
                    "No confident match for '%s' (distance %d, confidence %d)",
                    query,
                    best_distance,
                    confidence_for(best_distance),
                )
                return None
            results = results.filter(lambda result, _key: result.id == best_id)

        if results.count() == 0:
            raise NoSearchResultsError(query)
        if results.count() > 1:
            raise MultipleSearchResultsError(query, [result.label for result in results])

        return results.first().id

    @staticmethod
    def _closest(query: str, results: Collection[Any]) -> tuple[str | None, int]:
        best_id: str | None = None
        best_distance: int | None = None
        for result in results:
            distance = title_distance(query, result.title)
            # Strict comparison keeps the earliest candidate on ties
            if best_distance is None or distance < best_distance:
                best_id, best_distance = result.id, distance
        return best_id, best_distance if best_distance is not None else 0
