"""Collaborator protocols."""

from reelvault.shared.protocols.services import CacheProtocol, ExtractorProtocol, FetcherProtocol

__all__ = ["CacheProtocol", "ExtractorProtocol", "FetcherProtocol"]
