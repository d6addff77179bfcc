"""
scrapers/rules.py
Declarative extraction rules: CSS locators and the per-source rule set.

A source never subclasses engine code. It supplies an ``ExtractionRuleSet``
whose locators describe where each field lives in the document.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Pattern, Sequence, Tuple
from urllib.parse import urljoin, urlsplit

from scrapers.errors import MalformedLink, MissingRequiredField
from scrapers.models import CatalogEntry

_WS = re.compile(r"\s+")
_INT = re.compile(r"\d+")


def clean_text(value: str) -> str:
    return _WS.sub(" ", value).strip()


def url_to_id(url: str) -> str:
    """Strip scheme and host so ids survive mirror/domain changes."""
    parts = urlsplit(url)
    path = parts.path or "/"
    return f"{path}?{parts.query}" if parts.query else path


def is_absolute_http(url: str) -> bool:
    parts = urlsplit(url)
    return parts.scheme in ("http", "https") and bool(parts.netloc)


# -------------------------------------------------------
# 🔎 Locator
# -------------------------------------------------------

@dataclass(frozen=True)
class Locator:
    """CSS selector plus the extraction step applied to each match.

    ``attr`` of None extracts the element text. ``pattern`` keeps only the
    first group of values matching the regex. ``resolve`` controls whether
    relative hrefs are joined against the document URL.
    """

    selector: str
    attr: Optional[str] = None
    pattern: Optional[Pattern] = None
    resolve: bool = True

    def select(self, node) -> list:
        return list(node.select(self.selector))

    def _extract(self, element) -> Optional[str]:
        if self.attr is None:
            raw = element.get_text(" ")
        else:
            raw = element.get(self.attr)
            if isinstance(raw, list):
                raw = " ".join(raw)
        if raw is None:
            return None
        value = clean_text(raw)
        if not value:
            return None
        if self.pattern is not None:
            match = self.pattern.search(value)
            if not match:
                return None
            value = match.group(1) if match.groups() else match.group(0)
        return value

    def values(self, node) -> List[str]:
        out = []
        for element in self.select(node):
            value = self._extract(element)
            if value is not None:
                out.append(value)
        return out

    def first(self, node) -> Optional[str]:
        for element in self.select(node):
            value = self._extract(element)
            if value is not None:
                return value
        return None

    def require(self, node, field_name: str) -> str:
        value = self.first(node)
        if value is None:
            raise MissingRequiredField(field_name, self.selector)
        return value

    def link(self, node, base_url: str, field_name: str = "link", required: bool = True) -> Optional[str]:
        href = self.require(node, field_name) if required else self.first(node)
        if href is None:
            return None
        if self.resolve and base_url:
            href = urljoin(base_url, href)
        if not is_absolute_http(href):
            raise MalformedLink(href, field_name)
        return href

    def links(self, node, base_url: str) -> List[str]:
        """Every extracted value as an absolute URL; unusable ones are dropped."""
        out = []
        for value in self.values(node):
            href = urljoin(base_url, value) if (self.resolve and base_url) else value
            if is_absolute_http(href):
                out.append(href)
        return out


def css(selector: str, attr: Optional[str] = None, pattern: Optional[str] = None, resolve: bool = True) -> Locator:
    return Locator(selector, attr, re.compile(pattern) if pattern else None, resolve)


# -------------------------------------------------------
# 📐 Rule set
# -------------------------------------------------------

@dataclass(frozen=True)
class ExtractionRuleSet:
    catalog_item: Locator
    title: Locator
    link: Locator
    detail_title: Locator
    chapter_link: Locator
    page_image: Locator
    thumbnail: Optional[Locator] = None
    detail_tags: Optional[Locator] = None
    chapter_date: Optional[Locator] = None
    date_formats: Tuple[str, ...] = field(default=())
    page_count: Optional[Locator] = None

    def parse_entry(self, element, base_url: str) -> CatalogEntry:
        """Map one catalog item element. Raises ExtractionError for this item only."""
        title = self.title.require(element, "title")
        url = self.link.link(element, base_url, "link")
        thumbnail = None
        if self.thumbnail is not None:
            try:
                thumbnail = self.thumbnail.link(element, base_url, "thumbnail", required=False)
            except MalformedLink:
                thumbnail = None
        return CatalogEntry(id=url_to_id(url), title=title, thumbnail_url=thumbnail)

    def parse_tags(self, node) -> Tuple[str, ...]:
        if self.detail_tags is None:
            return ()
        return tuple(self.detail_tags.values(node))

    def parse_date(self, value: Optional[str]) -> Optional[datetime]:
        if not value:
            return None
        for fmt in self.date_formats:
            try:
                return datetime.strptime(value, fmt).replace(tzinfo=timezone.utc)
            except ValueError:
                continue
        return None


def max_int(values: Sequence[str], default: int = 1) -> int:
    """Largest integer found in ``values``; ``default`` when none parses."""
    numbers = [int(m.group(0)) for m in (_INT.search(v) for v in values) if m]
    return max(numbers) if numbers and max(numbers) > 0 else default
