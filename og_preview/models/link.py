"""Links found in Markdown documents."""

from typing import Optional

from pydantic import BaseModel

from og_preview.models.metadata import FetchResult


class MarkdownLink(BaseModel):
    """A link extracted from Markdown or inline HTML."""

    url: str
    text: str
    title: Optional[str] = None  # [text](url "title")
    is_external: bool = False


class LinkPreview(BaseModel):
    """A document link paired with its metadata fetch outcome."""

    link: MarkdownLink
    result: FetchResult
