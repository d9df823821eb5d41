"""Fetch-and-cache orchestration for link preview metadata.

For each URL:
1. Validate it (invalid input fails immediately, no cache or network access)
2. Serve it from the cache if a live entry exists
3. Otherwise walk the relays in priority order, trying each one
   retry_attempts + 1 times, until a page with an og:image comes back
4. Cache and return the first hit, or fail once every relay is exhausted

Failures are expected outcomes (callers render a plain link), so nothing
raised by a single attempt ever escapes `fetch_metadata`.
"""

import asyncio
from typing import Awaitable, Callable, Optional

import httpx
from rich.console import Console
from rich.markup import escape

from og_preview.cache import MetadataCache
from og_preview.config import (
    FetchConfig,
    PreviewSettings,
    load_cache_settings,
    load_fetch_config,
)
from og_preview.extractors import (
    RelayResponse,
    external_links,
    extract_links,
    fetch_via_relay,
    parse,
    unique_links,
)
from og_preview.models import FetchFailure, FetchResult, FetchSuccess, LinkPreview, Metadata
from og_preview.relays import RelayRegistry
from og_preview.validators import validate_url

console = Console()

INVALID_URL = "invalid URL"
EXHAUSTED = "failed to retrieve metadata"


class MetadataService:
    """Resolves Open Graph metadata for URLs through the relay chain.

    Owns one cache shared by all calls. Concurrent calls for the same URL are
    not coalesced; each misses the cache and fetches on its own.
    """

    def __init__(
        self,
        config: Optional[FetchConfig] = None,
        registry: Optional[RelayRegistry] = None,
        cache: Optional[MetadataCache] = None,
        client: Optional[httpx.AsyncClient] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.config = config or load_fetch_config()
        self.registry = registry or RelayRegistry()
        if cache is None:
            cache_settings = load_cache_settings()
            cache = MetadataCache(ttl=cache_settings.ttl, max_entries=cache_settings.max_entries)
        self.cache = cache
        self._client = client
        self._sleep = sleep

    async def fetch_metadata(self, raw_url: str, use_cache: bool = True) -> FetchResult:
        """Resolve preview metadata for a URL.

        Args:
            raw_url: Link target as written in the document
            use_cache: If False, skip the cache lookup and don't store the result

        Returns:
            FetchSuccess or FetchFailure, never raises for network problems
        """
        if not validate_url(raw_url):
            return FetchFailure(reason=INVALID_URL)

        if use_cache:
            cached = self.cache.get(raw_url)
            if cached is not None:
                return FetchSuccess(data=cached, from_cache=True)

        if self._client is not None:
            data = await self._walk_relays(self._client, raw_url)
        else:
            async with httpx.AsyncClient(follow_redirects=True) as client:
                data = await self._walk_relays(client, raw_url)

        if data is None:
            console.print(f"[red]No preview metadata for {escape(raw_url[:80])}[/red]")
            return FetchFailure(reason=EXHAUSTED)

        if use_cache:
            self.cache.put(raw_url, data)
        return FetchSuccess(data=data, from_cache=False)

    async def _walk_relays(self, client: httpx.AsyncClient, url: str) -> Optional[Metadata]:
        """Try every relay in order; first metadata with an image wins."""
        attempts = self.config.retry_attempts + 1

        for relay_index, relay in enumerate(self.registry):
            for attempt in range(attempts):
                try:
                    response = await fetch_via_relay(
                        client, self.registry, url, relay_index, self.config.timeout,
                    )
                except Exception as e:
                    response = RelayResponse(error=type(e).__name__.lower())

                if response.ok:
                    data = parse(response.body)
                    if data.found:
                        console.print(f"[dim]Preview via {escape(relay.name)}: {escape(url[:60])}[/dim]")
                        return data
                    # Page came back without og:image, try again right away
                    console.print(
                        f"[dim]No og:image via {escape(relay.name)} "
                        f"(attempt {attempt + 1}/{attempts}): {escape(url[:60])}[/dim]"
                    )
                    continue

                console.print(
                    f"[yellow]Relay {escape(relay.name)} failed "
                    f"(attempt {attempt + 1}/{attempts}): {response.error}[/yellow]"
                )
                if attempt < attempts - 1:
                    await self._sleep(self.config.retry_delay)

        return None

    def clear_cache(self) -> None:
        self.cache.clear()

    async def fetch_many(
        self,
        urls: list[str],
        max_concurrent: int = 10,
        use_cache: bool = True,
    ) -> dict[str, FetchResult]:
        """Fetch metadata for several URLs concurrently.

        Args:
            urls: URLs to resolve (duplicates are fetched once)
            max_concurrent: Maximum calls in flight at once
            use_cache: Passed through to fetch_metadata

        Returns:
            Dict mapping each URL to its result
        """
        semaphore = asyncio.Semaphore(max_concurrent)

        async def fetch_with_semaphore(url: str) -> tuple[str, FetchResult]:
            async with semaphore:
                return url, await self.fetch_metadata(url, use_cache=use_cache)

        pairs = await asyncio.gather(*[fetch_with_semaphore(url) for url in dict.fromkeys(urls)])
        return dict(pairs)

    async def preview_document(
        self,
        markdown: str,
        settings: Optional[PreviewSettings] = None,
        max_concurrent: int = 10,
    ) -> list[LinkPreview]:
        """Resolve previews for the external links of a Markdown document.

        Links are de-duplicated and capped at settings.max_images_per_page,
        in document order. Disabled previews return an empty list.
        """
        settings = settings or PreviewSettings()
        if not settings.enabled:
            return []

        links = unique_links(external_links(extract_links(markdown)))
        links = links[:settings.max_images_per_page]
        if not links:
            return []

        results = await self.fetch_many(
            [link.url for link in links],
            max_concurrent=max_concurrent,
            use_cache=settings.cache_enabled,
        )
        return [LinkPreview(link=link, result=results[link.url]) for link in links]

    async def aclose(self) -> None:
        """Close an injected client. Per-call clients are closed automatically."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
