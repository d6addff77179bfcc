"""
scrapers/pagination.py
Pagination state for catalog walks and sub-page walks.

    START -> FETCHING -> CONTINUE -> FETCHING -> ... -> DONE
    START | FETCHING | CONTINUE -> ABORTED (fetch failure or cancellation)

A cursor belongs to exactly one walk. Walks are strictly sequential: the
next request is only known once the previous document has been read.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Callable, Iterator, Optional, Tuple

from rich.console import Console

from scrapers.errors import FetchError, MalformedLink, ScraperError, WalkCancelled
from scrapers.models import CursorState, PageRequest
from scrapers.rules import Locator, max_int

console = Console()


@dataclass(frozen=True)
class LinkPagination:
    """Continue while ``next_page`` matches.

    With ``follow_href`` the next request is the matched link itself,
    otherwise it is page + 1 run through the listing's URL template.
    """

    next_page: Locator
    follow_href: bool = False


@dataclass(frozen=True)
class CountPagination:
    """Read the last page number once from the first document, then count up to it."""

    max_page: Locator


class CancelToken:
    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


class PaginationCursor:
    def __init__(
        self,
        page_url: Callable[[int], str],
        strategy=None,
        start_page: int = 1,
        subject: str = "",
        first_url: Optional[str] = None,
    ):
        if start_page < 1:
            raise ValueError("start_page must be >= 1")
        self.page_url = page_url
        self.strategy = strategy
        self.subject = subject
        self.state = CursorState.START
        self.current: Optional[PageRequest] = None
        self.next_request: Optional[PageRequest] = PageRequest(first_url or page_url(start_page), start_page)
        self.bound: Optional[int] = None
        self.error: Optional[ScraperError] = None
        self._visited = set()

    @property
    def has_more(self) -> bool:
        return self.state in (CursorState.START, CursorState.CONTINUE)

    @property
    def current_page_number(self) -> int:
        if self.current is not None:
            return self.current.page_number
        return self.next_request.page_number

    def begin(self) -> PageRequest:
        if not self.has_more:
            raise RuntimeError(f"Cursor for {self.subject} is {self.state.value}")
        self.state = CursorState.FETCHING
        self.current = self.next_request
        self.next_request = None
        self._visited.add(self.current.url)
        return self.current

    def advance(self, document) -> CursorState:
        if self.state is not CursorState.FETCHING:
            raise RuntimeError(f"advance() called in state {self.state.value}")
        upcoming = self._next_from(document)
        if upcoming is not None and upcoming.url in self._visited:
            console.log(
                f"[yellow]🔁 Next page loops back to {upcoming.url} on {self.subject}; stopping walk[/yellow]"
            )
            upcoming = None
        self.next_request = upcoming
        self.state = CursorState.CONTINUE if upcoming else CursorState.DONE
        return self.state

    def _next_from(self, document) -> Optional[PageRequest]:
        number = self.current.page_number + 1
        if isinstance(self.strategy, LinkPagination):
            if not self.strategy.next_page.select(document):
                return None
            if not self.strategy.follow_href:
                return PageRequest(self.page_url(number), number)
            try:
                href = self.strategy.next_page.link(document, document.url, "next page", required=False)
            except MalformedLink as exc:
                console.log(f"[yellow]⚠️ {exc} on {self.subject}; treating as last page[/yellow]")
                return None
            return PageRequest(href, number) if href else None
        if isinstance(self.strategy, CountPagination):
            if self.bound is None:
                self.bound = max_int(self.strategy.max_page.values(document), default=1)
            if self.current.page_number >= self.bound:
                return None
            return PageRequest(self.page_url(number), number)
        return None

    def abort(self, error: ScraperError) -> ScraperError:
        self.state = CursorState.ABORTED
        self.error = error
        if isinstance(error, FetchError) and not error.context:
            error.context = f"page {self.current_page_number} of walk for {self.subject}"
        return error


def walk_documents(
    fetcher,
    cursor: PaginationCursor,
    cancel_token: Optional[CancelToken] = None,
    max_pages: Optional[int] = None,
    headers=None,
) -> Iterator[Tuple[PageRequest, object]]:
    """Fetch pages one after another, yielding ``(request, document)`` pairs.

    Cancellation is checked before each request; a document that arrives
    after cancellation is discarded.
    """
    fetched = 0
    while cursor.has_more:
        if max_pages is not None and fetched >= max_pages:
            console.log(f"⏹️ Page limit {max_pages} reached for {cursor.subject}")
            return
        if cancel_token is not None and cancel_token.cancelled:
            raise cursor.abort(WalkCancelled(f"Walk for {cursor.subject} cancelled"))
        request = cursor.begin()
        try:
            document = fetcher.fetch(request.url, headers)
        except FetchError as exc:
            cursor.abort(exc)
            raise
        if cancel_token is not None and cancel_token.cancelled:
            raise cursor.abort(WalkCancelled(f"Walk for {cursor.subject} cancelled"))
        cursor.advance(document)
        fetched += 1
        yield request, document
