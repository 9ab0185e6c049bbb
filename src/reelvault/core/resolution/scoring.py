"""Edit-distance confidence scoring for title candidates."""

from __future__ import annotations

from rapidfuzz.distance import Levenshtein

from reelvault.shared.constants import MatchingConfig


def title_distance(query: str, title: str | None) -> int:
    """Case-insensitive Levenshtein distance between a query and a title."""
    return Levenshtein.distance(query.lower(), (title or "").lower())


def confidence_for(distance: int) -> int:
    """Confidence on a 0-100 scale: five points lost per edit."""
    return MatchingConfig.MAX_CONFIDENCE - MatchingConfig.DISTANCE_PENALTY * distance


def is_confident(distance: int) -> bool:
    return confidence_for(distance) >= MatchingConfig.MIN_CONFIDENCE


__all__ = ["confidence_for", "is_confident", "title_distance"]
