"""
Core components for ReelVault.

The recursive Collection, the typed entities with their hydration engine,
the cache payload codec and the title resolver.
"""

from .collection import Collection, SortMode

__all__ = ["Collection", "SortMode"]
