"""URL validators."""

from .url_validator import normalize_url, validate_url

__all__ = ["normalize_url", "validate_url"]
