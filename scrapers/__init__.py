"""
Scrapers package: the rule-driven catalog and chapter engine.
``scrapers.client.SourceClient`` wires it to a real fetcher.
"""

from .catalog import CatalogWalker
from .chapter import ChapterPageResolver
from .filters import FilterGroup, FilterModel
from .models import CatalogEntry, CatalogPage, ChapterRef, CursorState, EntryDetail, FilterOption, PageRef, PageRequest
from .pagination import CancelToken, CountPagination, LinkPagination, PaginationCursor
from .rules import ExtractionRuleSet, Locator, css

__all__ = [
    "CatalogWalker",
    "ChapterPageResolver",
    "FilterGroup",
    "FilterModel",
    "CatalogEntry",
    "CatalogPage",
    "ChapterRef",
    "CursorState",
    "EntryDetail",
    "FilterOption",
    "PageRef",
    "PageRequest",
    "CancelToken",
    "CountPagination",
    "LinkPagination",
    "PaginationCursor",
    "ExtractionRuleSet",
    "Locator",
    "css",
]
