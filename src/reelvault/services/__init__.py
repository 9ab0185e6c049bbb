"""Services: HTTP fetching, title extraction, caching and the client facade."""

from reelvault.services.extractor import LinkedDataExtractor
from reelvault.services.fetcher import HttpFetcher
from reelvault.services.imdb_client import ImdbClient

__all__ = ["HttpFetcher", "ImdbClient", "LinkedDataExtractor"]
