"""
scrapers/client.py
One object per source exposing everything a host needs. Share a single
client between threads: its rate limiter is what keeps concurrent walks
against the same site within budget.
"""

from __future__ import annotations

from typing import Optional, Tuple

from rich.console import Console

from config import get_config
from constants import DEFAULT_MAX_WALK_PAGES
from fetcher.document import DocumentFetcher
from fetcher.rate_limit import build_rate_limiter
from fetcher.user_agents import UserAgentPolicy
from scrapers.catalog import CatalogWalker
from scrapers.chapter import ChapterPageResolver
from scrapers.filters import FilterModel
from scrapers.models import FilterOption

console = Console()


class SourceClient:
    def __init__(self, source, fetcher, max_pages: Optional[int] = None):
        self.source = source
        self.fetcher = fetcher
        self.walker = CatalogWalker(source, fetcher, max_pages or DEFAULT_MAX_WALK_PAGES)
        self.resolver = ChapterPageResolver(source, fetcher)

    @classmethod
    def from_config(cls, source, config=None) -> "SourceClient":
        config = config or get_config()
        fetcher = DocumentFetcher(
            rate_limiter=build_rate_limiter(source.name, source.rate_limit, config),
            limited_host=source.host,
            user_agents=UserAgentPolicy(source.user_agent or config.user_agent_policy),
            timeout=config.request_timeout,
        )
        console.log(f"🔌 Source {source.name} ready ({source.base_url})")
        return cls(source, fetcher, max_pages=config.max_walk_pages)

    @property
    def name(self) -> str:
        return self.source.name

    @property
    def supports_latest(self) -> bool:
        return self.source.supports_latest

    # catalog
    def browse(self, page: int = 1):
        return self.walker.browse(page)

    def latest(self, page: int = 1):
        return self.walker.latest(page)

    def search(self, query: str, filters: Optional[FilterModel] = None, page: int = 1):
        return self.walker.search(query, filters, page)

    def iter_browse(self, **kwargs):
        return self.walker.iter_browse(**kwargs)

    def iter_latest(self, **kwargs):
        return self.walker.iter_latest(**kwargs)

    def iter_search(self, query: str, filters: Optional[FilterModel] = None, **kwargs):
        return self.walker.iter_search(query, filters, **kwargs)

    # filters
    def filter_model(self) -> FilterModel:
        return self.source.filter_model()

    def get_filter_options(self) -> Tuple[FilterOption, ...]:
        return self.filter_model().build_options()

    # entries
    def resolve_details(self, entry):
        return self.resolver.resolve_details(entry)

    def resolve_chapter(self, entry):
        return self.resolver.resolve_chapter(entry)

    def resolve_pages(self, chapter, cancel_token=None):
        return self.resolver.resolve_pages(chapter, cancel_token)

    def close(self) -> None:
        self.fetcher.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
