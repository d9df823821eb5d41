"""Open Graph metadata fetching for Markdown link previews."""

from og_preview.cache import MetadataCache
from og_preview.config import FetchConfig, PreviewSettings
from og_preview.models import FetchFailure, FetchResult, FetchSuccess, Metadata
from og_preview.relays import RelayRegistry
from og_preview.service import MetadataService

__all__ = [
    "MetadataCache",
    "FetchConfig",
    "PreviewSettings",
    "FetchFailure",
    "FetchResult",
    "FetchSuccess",
    "Metadata",
    "RelayRegistry",
    "MetadataService",
]
