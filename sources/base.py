"""
sources/base.py
Configuration values describing one source. Adding a site means building a
new ``Source``; engine code is never subclassed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple
from urllib.parse import quote_plus, urljoin, urlsplit

from fetcher.rate_limit import RateLimit
from scrapers.errors import MalformedLink
from scrapers.filters import FilterGroup, FilterModel
from scrapers.pagination import CountPagination, LinkPagination
from scrapers.rules import ExtractionRuleSet


@dataclass(frozen=True)
class Listing:
    """URL template for one catalog listing and how it paginates.

    Templates may use ``{base_url}``, ``{page}`` and ``{query}``.
    ``first_url`` replaces the template for page 1 only.
    """

    url: str
    first_url: Optional[str] = None
    pagination: Optional[LinkPagination | CountPagination] = None

    def build_url(self, base_url: str, page: int, query: str = "") -> str:
        template = self.first_url if (page <= 1 and self.first_url) else self.url
        return template.format(base_url=base_url, page=page, query=quote_plus(query))


@dataclass(frozen=True)
class Source:
    name: str
    base_url: str
    lang: str
    rules: ExtractionRuleSet
    popular: Listing
    search: Listing
    sub_page_url: str
    latest: Optional[Listing] = None
    filter_pagination: Optional[LinkPagination] = None
    filter_groups: Tuple[FilterGroup, ...] = field(default=())
    filter_none_label: str = "None"
    rate_limit: Optional[RateLimit] = None
    user_agent: Optional[str] = None

    @property
    def host(self) -> str:
        return (urlsplit(self.base_url).hostname or "").lower()

    @property
    def supports_latest(self) -> bool:
        return self.latest is not None

    def absolute_url(self, entry_id: str) -> str:
        """Entry id joined onto ``base_url``. Ids pointing at another host are rejected."""
        url = urljoin(self.base_url + "/", entry_id)
        parts = urlsplit(url)
        host = (parts.hostname or "").lower()
        if parts.scheme not in ("http", "https") or host.removeprefix("www.") != self.host.removeprefix("www."):
            raise MalformedLink(entry_id, "entry id")
        return url

    def filter_model(self) -> FilterModel:
        return FilterModel(self.filter_groups, self.filter_none_label)

    def sub_page(self, chapter_url: str, page: int) -> str:
        return self.sub_page_url.format(chapter_url=chapter_url, page=page)
