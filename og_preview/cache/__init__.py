"""Metadata cache."""

from .store import MetadataCache

__all__ = ["MetadataCache"]
