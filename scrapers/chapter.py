"""
scrapers/chapter.py
Resolves an entry's details, its single virtual chapter and the ordered
list of page images behind that chapter.

Unlike catalog walks these operations are all-or-nothing: a missing
required field or any failed sub-page fails the whole call.
"""

from __future__ import annotations

from typing import List, Optional

from rich.console import Console

from scrapers.errors import FetchError, WalkCancelled
from scrapers.models import CatalogEntry, ChapterRef, EntryDetail, PageRef
from scrapers.pagination import CancelToken, CountPagination, PaginationCursor, walk_documents
from scrapers.rules import url_to_id

console = Console()


class ChapterPageResolver:
    def __init__(self, source, fetcher):
        self.source = source
        self.fetcher = fetcher

    def _fetch(self, url: str, subject: str):
        console.log(f"🌐 Fetching {subject}: {url}")
        try:
            return self.fetcher.fetch(url)
        except FetchError as exc:
            exc.context = exc.context or subject
            raise

    # -------------------------------------------------------
    # 📝 Details & chapter
    # -------------------------------------------------------

    def resolve_details(self, entry: CatalogEntry) -> EntryDetail:
        rules = self.source.rules
        document = self._fetch(self.source.absolute_url(entry.id), f"details for {entry.id}")
        title = rules.detail_title.require(document, "detail title")
        return EntryDetail(title=title, tags=rules.parse_tags(document))

    def resolve_chapter(self, entry: CatalogEntry) -> ChapterRef:
        rules = self.source.rules
        document = self._fetch(self.source.absolute_url(entry.id), f"chapter for {entry.id}")
        url = rules.chapter_link.link(document, document.url, "chapter link")
        published = None
        if rules.chapter_date is not None:
            published = rules.parse_date(rules.chapter_date.first(document))
        label = published.strftime("%Y/%m/%d") if published else entry.title
        return ChapterRef(id=url_to_id(url), display_label=label, published_at=published)

    # -------------------------------------------------------
    # 📸 Pages
    # -------------------------------------------------------

    def resolve_pages(self, chapter: ChapterRef, cancel_token: Optional[CancelToken] = None) -> List[PageRef]:
        """Walk sub-pages 1..N and number their images 0..M-1 in discovery order.

        Sub-page 1 is the chapter document itself; its canonical link is the
        base for the remaining sub-page URLs.
        """
        rules = self.source.rules
        chapter_url = self.source.absolute_url(chapter.id)
        strategy = CountPagination(rules.page_count) if rules.page_count is not None else None
        cursor = PaginationCursor(
            lambda page: chapter_url,
            strategy,
            subject=f"{self.source.name} chapter {chapter.id}",
            first_url=chapter_url,
        )
        pages: List[PageRef] = []

        def collect(document):
            for image_url in rules.page_image.links(document, document.url):
                pages.append(PageRef(index=len(pages), image_url=image_url))

        if cancel_token is not None and cancel_token.cancelled:
            raise cursor.abort(WalkCancelled(f"Walk for {cursor.subject} cancelled"))
        cursor.begin()
        try:
            first = self.fetcher.fetch(chapter_url)
        except FetchError as exc:
            cursor.abort(exc)
            raise
        base_url = rules.chapter_link.link(first, first.url, "chapter link")
        cursor.page_url = lambda page: self.source.sub_page(base_url, page)
        cursor.advance(first)
        collect(first)

        for _request, document in walk_documents(self.fetcher, cursor, cancel_token):
            collect(document)

        console.log(f"🖼️ Found {len(pages)} pages across {cursor.bound or 1} sub-pages for {chapter.id}")
        return pages
