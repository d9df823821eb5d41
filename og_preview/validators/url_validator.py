"""Check that link targets are fetchable http(s) URLs."""

import ipaddress
from urllib.parse import urlsplit, urlunsplit

ALLOWED_SCHEMES = {"http", "https"}

# Code points a browser refuses in a host name
FORBIDDEN_HOST_CHARS = set(" #%/:<>?@[\\]^|\"{}`")
# urlsplit silently drops these, so they must be caught before parsing
STRIPPED_CHARS = set("\t\r\n")


def _valid_host(host: str) -> bool:
    """Host is an IP literal or dot-separated labels without forbidden characters."""
    if ":" in host:
        # Bracketed IPv6 literal, brackets already removed by urlsplit
        try:
            ipaddress.IPv6Address(host)
        except ValueError:
            return False
        return True

    if any(c in FORBIDDEN_HOST_CHARS or ord(c) < 0x20 or ord(c) == 0x7F for c in host):
        return False

    # A single trailing dot is a fully qualified name
    labels = host[:-1].split(".") if host.endswith(".") else host.split(".")
    return all(labels)


def validate_url(raw: object) -> bool:
    """Return True only for absolute http/https URLs with a host.

    Never raises and never touches the network.
    """
    if not isinstance(raw, str) or not raw or raw != raw.strip():
        return False
    if any(c in STRIPPED_CHARS for c in raw):
        return False

    try:
        parts = urlsplit(raw)
        # Accessing .port validates the port number
        parts.port
    except ValueError:
        return False

    if parts.scheme.lower() not in ALLOWED_SCHEMES or not parts.hostname:
        return False
    return _valid_host(parts.hostname)


def normalize_url(raw: str) -> str:
    """Canonical form for de-duplicating links.

    Lower-cases scheme and host and gives an empty path a "/". Unparseable
    input is returned unchanged.
    """
    try:
        parts = urlsplit(raw)
    except ValueError:
        return raw

    if not parts.scheme or not parts.netloc:
        return raw

    return urlunsplit((
        parts.scheme.lower(),
        parts.netloc.lower(),
        parts.path or "/",
        parts.query,
        parts.fragment,
    ))
