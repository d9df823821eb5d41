"""Find links in Markdown text that are candidates for previews."""

import re

from og_preview.models import MarkdownLink
from og_preview.validators import normalize_url, validate_url

# [text](url "title")
MARKDOWN_LINK = re.compile(r'\[([^\]]*)\]\(([^)]+?)(?:\s+"([^"]*)")?\)')
# <a href="url">text</a>
HTML_LINK = re.compile(r"""<a\s+[^>]*href=["']([^"']*)["'][^>]*>([^<]*)</a>""", re.I)


def is_external_url(url: str) -> bool:
    return validate_url(url)


def extract_links(markdown: str) -> list[MarkdownLink]:
    """Extract Markdown links, then inline HTML anchors not already seen."""
    links: list[MarkdownLink] = []

    for match in MARKDOWN_LINK.finditer(markdown):
        text, url, title = match.group(1), match.group(2), match.group(3)
        if not url or not text:
            continue
        url = url.strip()
        links.append(MarkdownLink(
            url=url,
            text=text.strip(),
            title=title.strip() if title else None,
            is_external=is_external_url(url),
        ))

    seen = {link.url for link in links}
    for match in HTML_LINK.finditer(markdown):
        url, text = match.group(1), match.group(2)
        if not url or not text:
            continue
        url = url.strip()
        if url in seen:
            continue
        seen.add(url)
        links.append(MarkdownLink(
            url=url,
            text=text.strip(),
            is_external=is_external_url(url),
        ))

    return links


def unique_links(links: list[MarkdownLink]) -> list[MarkdownLink]:
    """Keep the first link for each normalized URL."""
    seen: set[str] = set()
    unique = []
    for link in links:
        key = normalize_url(link.url)
        if key in seen:
            continue
        seen.add(key)
        unique.append(link)
    return unique


def external_links(links: list[MarkdownLink]) -> list[MarkdownLink]:
    return [link for link in links if link.is_external]
