"""Query → identifier resolution."""

from reelvault.core.resolution.resolver import TitleResolver
from reelvault.core.resolution.scoring import confidence_for, is_confident, title_distance

__all__ = ["TitleResolver", "confidence_for", "is_confident", "title_distance"]
