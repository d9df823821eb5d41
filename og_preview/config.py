"""Runtime configuration for metadata fetching and link previews.

Defaults mirror the editor's original constants; every value can be
overridden from the environment (a `.env` file is loaded by the CLI).
"""

import json
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError
from rich.console import Console
from rich.markup import escape

console = Console()

DEFAULT_TIMEOUT = 15.0  # seconds per relay request
DEFAULT_RETRY_ATTEMPTS = 1  # extra tries per relay
DEFAULT_RETRY_DELAY = 2.0  # seconds between tries on the same relay

CACHE_TTL_SECONDS = 30 * 60
MAX_CACHE_ENTRIES = 100

SETTINGS_FILE = Path.home() / ".config" / "og-preview" / "settings.json"


class FetchConfig(BaseModel):
    """Per-request timeout and retry budget, read-only after creation."""

    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    retry_attempts: int = Field(default=DEFAULT_RETRY_ATTEMPTS, ge=0)
    retry_delay: float = Field(default=DEFAULT_RETRY_DELAY, ge=0)

    class Config:
        frozen = True


class CacheSettings(BaseModel):
    """Lifetime and capacity of the metadata cache."""

    ttl: float = Field(default=CACHE_TTL_SECONDS, gt=0)
    max_entries: int = Field(default=MAX_CACHE_ENTRIES, ge=1)

    class Config:
        frozen = True


class PreviewSettings(BaseModel):
    """User-facing toggles for link previews in a document."""

    enabled: bool = True
    max_images_per_page: int = Field(default=10, ge=0)
    cache_enabled: bool = True

    class Config:
        extra = "ignore"


def _env_overrides(mapping: dict[str, str]) -> dict[str, str]:
    """Collect the set environment variables for the given field mapping."""
    overrides = {}
    for field, var in mapping.items():
        value = os.environ.get(var)
        if value is not None and value.strip():
            overrides[field] = value.strip()
    return overrides


def load_fetch_config() -> FetchConfig:
    """Build FetchConfig from OG_PREVIEW_* environment variables."""
    return FetchConfig(**_env_overrides({
        "timeout": "OG_PREVIEW_TIMEOUT",
        "retry_attempts": "OG_PREVIEW_RETRY_ATTEMPTS",
        "retry_delay": "OG_PREVIEW_RETRY_DELAY",
    }))


def load_cache_settings() -> CacheSettings:
    """Build CacheSettings from OG_PREVIEW_CACHE_* environment variables."""
    return CacheSettings(**_env_overrides({
        "ttl": "OG_PREVIEW_CACHE_TTL",
        "max_entries": "OG_PREVIEW_CACHE_MAX_ENTRIES",
    }))


def load_settings(path: Optional[Path] = None) -> PreviewSettings:
    """Load preview settings, falling back to defaults for anything unusable."""
    path = path or SETTINGS_FILE
    if not path.exists():
        return PreviewSettings()

    try:
        with open(path) as f:
            stored = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        console.print(f"[yellow]Failed to load settings from {escape(str(path))}: {escape(str(e))}[/yellow]")
        return PreviewSettings()

    if not isinstance(stored, dict):
        console.print(f"[yellow]Ignoring malformed settings file {escape(str(path))}[/yellow]")
        return PreviewSettings()

    # Keep every key that validates on its own
    settings = PreviewSettings()
    for key, value in stored.items():
        if key not in PreviewSettings.model_fields:
            continue
        try:
            settings = PreviewSettings.model_validate({**settings.model_dump(), key: value})
        except ValidationError:
            console.print(f"[yellow]Ignoring invalid setting {escape(f'{key}={value!r}')}[/yellow]")
    return settings


def save_settings(settings: PreviewSettings, path: Optional[Path] = None) -> None:
    """Persist preview settings as JSON."""
    path = path or SETTINGS_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(settings.model_dump(), f, indent=2)
