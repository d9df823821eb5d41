"""URL → preview metadata extraction.

This module provides the pieces the service chains together:
1. Link discovery in Markdown documents
2. Page retrieval through a relay endpoint
3. Open Graph parsing of the returned HTML
"""

from og_preview.extractors.fetch import fetch_via_relay, RelayResponse
from og_preview.extractors.og_parser import parse
from og_preview.extractors.links import extract_links, unique_links, external_links, is_external_url

__all__ = [
    "fetch_via_relay",
    "RelayResponse",
    "parse",
    "extract_links",
    "unique_links",
    "external_links",
    "is_external_url",
]
