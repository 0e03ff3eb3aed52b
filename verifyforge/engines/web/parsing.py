"""Lightweight HTML inspection for the web engine."""

import re
from collections.abc import Sequence
from dataclasses import dataclass, field

TITLE_RE = re.compile(r"<title[^>]*>([^<]+)</title>", re.IGNORECASE)
META_DESCRIPTION_RE = re.compile(
    r"<meta[^>]*name=[\"']description[\"'][^>]*content=[\"']([^\"']*)[\"']",
    re.IGNORECASE,
)
H1_RE = re.compile(r"<h1[^>]*>", re.IGNORECASE)
IMG_RE = re.compile(r"<img[^>]*>", re.IGNORECASE)
ALT_RE = re.compile(r"alt=[\"'][^\"']*[\"']", re.IGNORECASE)
HREF_RE = re.compile(r"<a[^>]*href=[\"']([^\"']*)[\"']", re.IGNORECASE)


@dataclass(frozen=True, kw_only=True)
class PageStructure:
    """Structural facts extracted from an HTML document."""

    title: str = ""
    meta_description: str = ""
    h1_count: int = 0
    image_count: int = 0
    images_without_alt: int = 0
    links: Sequence[str] = field(default_factory=list)


@dataclass(frozen=True, kw_only=True)
class LinkSplit:
    """Links split by whether they stay on the page's origin."""

    internal: Sequence[str]
    external: Sequence[str]


def parse_page(html: str) -> PageStructure:
    """Extract title, description, headings, images and links from HTML."""
    title_match = TITLE_RE.search(html)
    description_match = META_DESCRIPTION_RE.search(html)
    images = IMG_RE.findall(html)

    return PageStructure(
        title=title_match.group(1).strip() if title_match else "",
        meta_description=description_match.group(1) if description_match else "",
        h1_count=len(H1_RE.findall(html)),
        image_count=len(images),
        images_without_alt=sum(1 for img in images if not ALT_RE.search(img)),
        links=[href for href in HREF_RE.findall(html) if href],
    )


def split_links(links: Sequence[str], origin: str) -> LinkSplit:
    """Split links into internal and external relative to an origin.

    Links that are neither root-relative nor absolute http(s) URLs
    (fragments, mailto:, relative paths) count as neither.
    """
    return LinkSplit(
        internal=[
            link for link in links if link.startswith("/") or link.startswith(origin)
        ],
        external=[
            link
            for link in links
            if link.startswith("http") and not link.startswith(origin)
        ],
    )
