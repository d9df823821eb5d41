"""Cache entry model."""

from pydantic import BaseModel

from og_preview.models.metadata import Metadata


class CacheEntry(BaseModel):
    """A cached metadata value with its lifetime."""

    key: str
    value: Metadata
    created_at: float
    expires_at: float  # created_at + ttl

    def is_expired(self, now: float) -> bool:
        return now > self.expires_at
