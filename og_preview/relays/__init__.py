"""Relay endpoint registry."""

from .registry import DEFAULT_RELAYS, RelayEndpoint, RelayKind, RelayRegistry

__all__ = ["DEFAULT_RELAYS", "RelayEndpoint", "RelayKind", "RelayRegistry"]
