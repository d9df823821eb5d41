"""Relay endpoints used to fetch pages the browser can't reach directly.

Relays are third-party CORS proxies. Some forward the target body verbatim,
others wrap it in a JSON envelope; the kind is fixed per relay here rather
than guessed from the URL at request time.
"""

from enum import Enum
from typing import Iterable, Iterator
from urllib.parse import quote

from pydantic import BaseModel

# Characters encodeURIComponent leaves untouched, on top of quote()'s alphanumerics and "_.-~"
_URI_COMPONENT_SAFE = "!*'()"


class RelayKind(str, Enum):
    """How a relay returns the target page."""

    ENVELOPE = "envelope"  # {"contents": "<html>..."}
    RAW_BODY = "raw"


class RelayEndpoint(BaseModel):
    """A relay URL template with a `{url}` placeholder for the encoded target."""

    name: str
    template: str
    kind: RelayKind = RelayKind.RAW_BODY
    envelope_field: str = "contents"

    class Config:
        frozen = True

    def build_url(self, target: str) -> str:
        return self.template.replace("{url}", quote(target, safe=_URI_COMPONENT_SAFE))


# Priority order: first relay is tried first
DEFAULT_RELAYS = (
    RelayEndpoint(
        name="allorigins",
        template="https://api.allorigins.win/get?url={url}",
        kind=RelayKind.ENVELOPE,
    ),
    RelayEndpoint(
        name="codetabs",
        template="https://api.codetabs.com/v1/proxy?quest={url}",
    ),
    RelayEndpoint(
        name="corsproxy",
        template="https://corsproxy.org/?{url}",
    ),
)


class RelayRegistry:
    """Immutable, ordered collection of relay endpoints."""

    def __init__(self, endpoints: Iterable[RelayEndpoint] = DEFAULT_RELAYS):
        self._endpoints = tuple(endpoints)

    def endpoint(self, relay_index: int) -> RelayEndpoint:
        """Get the relay at a position.

        Raises:
            IndexError: for any index outside 0..count()-1. Callers bound
                their loops by count(), so this is a programming error.
        """
        if not 0 <= relay_index < len(self._endpoints):
            raise IndexError(
                f"relay index {relay_index} out of range (0..{len(self._endpoints) - 1})"
            )
        return self._endpoints[relay_index]

    def build_relay_url(self, target: str, relay_index: int) -> str:
        """Embed the percent-encoded target URL into a relay's template."""
        return self.endpoint(relay_index).build_url(target)

    def uses_envelope(self, relay_index: int) -> bool:
        return self.endpoint(relay_index).kind is RelayKind.ENVELOPE

    def count(self) -> int:
        return len(self._endpoints)

    def __len__(self) -> int:
        return len(self._endpoints)

    def __iter__(self) -> Iterator[RelayEndpoint]:
        return iter(self._endpoints)
