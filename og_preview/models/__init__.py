"""Data models for link previews."""

from og_preview.models.metadata import Metadata, FetchSuccess, FetchFailure, FetchResult
from og_preview.models.cache import CacheEntry
from og_preview.models.link import MarkdownLink, LinkPreview

__all__ = [
    "Metadata",
    "FetchSuccess",
    "FetchFailure",
    "FetchResult",
    "CacheEntry",
    "MarkdownLink",
    "LinkPreview",
]
