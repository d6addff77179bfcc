"""
scrapers/catalog.py
Catalog listings (popular / latest / search) for any configured source.
"""

from __future__ import annotations

from typing import Iterator, List, Optional, Set, Tuple

from rich.console import Console

from constants import DEFAULT_MAX_WALK_PAGES
from scrapers.errors import ExtractionError, UnsupportedOperation
from scrapers.filters import FilterModel
from scrapers.models import CatalogEntry, CatalogPage, CursorState
from scrapers.pagination import CancelToken, PaginationCursor, walk_documents

console = Console()


class CatalogWalker:
    """Turns a source's listing rules into pages or lazy streams of entries.

    Every call builds its own cursor, so one walker can serve many threads.
    """

    def __init__(self, source, fetcher, max_pages: int = DEFAULT_MAX_WALK_PAGES):
        self.source = source
        self.fetcher = fetcher
        self.max_pages = max_pages

    # -------------------------------------------------------
    # 🧭 Cursor construction
    # -------------------------------------------------------

    def _listing_cursor(self, listing, start_page: int, subject: str, query: str = "") -> PaginationCursor:
        base_url = self.source.base_url
        return PaginationCursor(
            lambda page: listing.build_url(base_url, page, query),
            listing.pagination,
            start_page=start_page,
            subject=f"{self.source.name} {subject}",
        )

    def _filter_cursor(self, filters: FilterModel) -> PaginationCursor:
        option = filters.selected
        return PaginationCursor(
            lambda page: option.target_url,
            self.source.filter_pagination,
            subject=f"{self.source.name} filter {option.display_name!r}",
            first_url=option.target_url,
        )

    def _search_cursor(self, query: str, filters: Optional[FilterModel], page: int) -> PaginationCursor:
        if filters is not None and filters.is_overriding_query():
            console.log(f"🏷️ {self.source.name}: filter {filters.selected.display_name!r} overrides query")
            return self._filter_cursor(filters)
        return self._listing_cursor(self.source.search, page, f"search {query!r}", query=query)

    def _require_latest(self):
        if not self.source.supports_latest:
            raise UnsupportedOperation(f"{self.source.name} has no latest-updates listing")
        return self.source.latest

    # -------------------------------------------------------
    # 🧩 Parsing
    # -------------------------------------------------------

    def parse_entries(self, document, seen: Optional[Set[str]] = None) -> Tuple[List[CatalogEntry], int]:
        """Entries of one listing document in document order, and how many items were skipped."""
        rules = self.source.rules
        seen = set() if seen is None else seen
        entries, skipped = [], 0
        for element in rules.catalog_item.select(document):
            try:
                entry = rules.parse_entry(element, document.url)
            except ExtractionError as exc:
                skipped += 1
                console.log(f"[yellow]⚠️ Skipping catalog item on {document.url}: {exc}[/yellow]")
                continue
            if entry.id in seen:
                continue
            seen.add(entry.id)
            entries.append(entry)
        return entries, skipped

    # -------------------------------------------------------
    # 📄 Single page operations
    # -------------------------------------------------------

    def _page_at(self, cursor: PaginationCursor, page: int) -> CatalogPage:
        """Fetch until the cursor reaches ``page`` and parse only that document.

        Template-driven cursors start on ``page`` directly; cursors that follow
        next links from a fixed URL have to walk there.
        """
        if page > 1 and cursor.strategy is None:
            console.log(f"📭 {cursor.subject}: single-page listing has no page {page}")
            return CatalogPage((), page, CursorState.DONE)
        hops = max(page - cursor.current_page_number + 1, 1)
        last = None
        for request, document in walk_documents(self.fetcher, cursor, max_pages=hops):
            last = (request, document)
        if last is None or last[0].page_number != page:
            console.log(f"📭 {cursor.subject}: listing ends before page {page}")
            return CatalogPage((), page, CursorState.DONE)
        request, document = last
        entries, skipped = self.parse_entries(document)
        console.log(f"📄 {cursor.subject} page {page}: {len(entries)} entries")
        return CatalogPage(tuple(entries), page, cursor.state, cursor.next_request, skipped)

    def browse(self, page: int = 1) -> CatalogPage:
        return self._page_at(self._listing_cursor(self.source.popular, page, "browse"), page)

    def latest(self, page: int = 1) -> CatalogPage:
        listing = self._require_latest()
        return self._page_at(self._listing_cursor(listing, page, "latest"), page)

    def search(self, query: str, filters: Optional[FilterModel] = None, page: int = 1) -> CatalogPage:
        return self._page_at(self._search_cursor(query, filters, page), page)

    # -------------------------------------------------------
    # 🔁 Multi-page walks
    # -------------------------------------------------------

    def _walk(self, cursor: PaginationCursor, max_pages: Optional[int], cancel_token: Optional[CancelToken]) -> Iterator[CatalogEntry]:
        if cursor.strategy is None and cursor.current_page_number > 1:
            return
        seen: Set[str] = set()
        limit = max_pages or self.max_pages
        for request, document in walk_documents(self.fetcher, cursor, cancel_token, limit):
            entries, _ = self.parse_entries(document, seen)
            console.log(f"📄 {cursor.subject} page {request.page_number}: {len(entries)} entries")
            yield from entries

    def iter_browse(self, start_page: int = 1, max_pages: Optional[int] = None, cancel_token: Optional[CancelToken] = None) -> Iterator[CatalogEntry]:
        cursor = self._listing_cursor(self.source.popular, start_page, "browse")
        return self._walk(cursor, max_pages, cancel_token)

    def iter_latest(self, start_page: int = 1, max_pages: Optional[int] = None, cancel_token: Optional[CancelToken] = None) -> Iterator[CatalogEntry]:
        listing = self._require_latest()
        cursor = self._listing_cursor(listing, start_page, "latest")
        return self._walk(cursor, max_pages, cancel_token)

    def iter_search(
        self,
        query: str,
        filters: Optional[FilterModel] = None,
        start_page: int = 1,
        max_pages: Optional[int] = None,
        cancel_token: Optional[CancelToken] = None,
    ) -> Iterator[CatalogEntry]:
        cursor = self._search_cursor(query, filters, start_page)
        return self._walk(cursor, max_pages, cancel_token)
