"""Open Graph metadata and fetch outcomes."""

from typing import Literal, Optional, Union

from pydantic import BaseModel


class Metadata(BaseModel):
    """Link preview fields parsed from a page."""

    image_url: Optional[str] = None  # og:image
    title: Optional[str] = None  # og:title, else <title>
    description: Optional[str] = None
    site_name: Optional[str] = None
    image_width: Optional[int] = None
    image_height: Optional[int] = None

    @property
    def found(self) -> bool:
        """A page only counts as a preview when it carries an image."""
        return bool(self.image_url)


class FetchSuccess(BaseModel):
    """Metadata was resolved, either from the cache or a relay."""

    ok: Literal[True] = True
    data: Metadata
    from_cache: bool = False


class FetchFailure(BaseModel):
    """Invalid input or every relay exhausted. Callers show a plain link."""

    ok: Literal[False] = False
    reason: str


FetchResult = Union[FetchSuccess, FetchFailure]
