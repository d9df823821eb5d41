"""Extract Open Graph preview fields from raw HTML.

Pattern matching only: each <meta property="og:..." content="..."> tag is
matched on its own, so one missing or broken field never blocks the others.
Tags that put `content` before `property`, or use single quotes, are not
recognised. Swap `parse` for an HTML parser if that starts to matter.
"""

import re
from typing import Optional

from og_preview.models import Metadata


def _meta_pattern(prop: str) -> re.Pattern:
    return re.compile(
        rf'<meta[^>]*property="{re.escape(prop)}"[^>]*content="([^"]*)"[^>]*>',
        re.I,
    )


OG_PATTERNS = {
    "image_url": _meta_pattern("og:image"),
    "title": _meta_pattern("og:title"),
    "description": _meta_pattern("og:description"),
    "site_name": _meta_pattern("og:site_name"),
    "image_width": _meta_pattern("og:image:width"),
    "image_height": _meta_pattern("og:image:height"),
}

INT_FIELDS = {"image_width", "image_height"}

TITLE_PATTERN = re.compile(r"<title[^>]*>([^<]*)</title>", re.I)
LEADING_INT = re.compile(r"[+-]?\d+")


def _first_group(pattern: re.Pattern, html: str) -> Optional[str]:
    match = pattern.search(html)
    if not match:
        return None
    value = match.group(1).strip()
    return value or None


def parse_dimension(value: str) -> Optional[int]:
    """Leading integer of a dimension ("600px" -> 600). Zero or junk -> None."""
    match = LEADING_INT.match(value)
    if not match:
        return None
    number = int(match.group(0))
    return number or None


def parse(raw_body: Optional[str]) -> Metadata:
    """Parse OG metadata out of an HTML document. Never raises."""
    if not raw_body or not isinstance(raw_body, str):
        return Metadata()

    fields: dict = {}
    for field, pattern in OG_PATTERNS.items():
        value = _first_group(pattern, raw_body)
        if value is None:
            continue
        if field in INT_FIELDS:
            number = parse_dimension(value)
            if number is not None:
                fields[field] = number
        else:
            fields[field] = value

    # No og:title, use the document title
    if "title" not in fields:
        title = _first_group(TITLE_PATTERN, raw_body)
        if title:
            fields["title"] = title

    return Metadata(**fields)
