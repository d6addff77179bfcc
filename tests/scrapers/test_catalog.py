from __future__ import annotations

from dataclasses import replace

import pytest

from scrapers.catalog import CatalogWalker
from scrapers.errors import PermanentFetchError, UnsupportedOperation, http_status_error
from scrapers.filters import FilterGroup, FilterModel
from scrapers.models import CursorState
from scrapers.pagination import CountPagination
from scrapers.rules import css
from sources.base import Listing
from support import BASE, DEMO, FakeFetcher, item, listing, make_source

POPULAR_1 = f"{BASE}/popular?page=1"
POPULAR_2 = f"{BASE}/popular?page=2"


def test_browse_returns_entries_and_next_request() -> None:
    fetcher = FakeFetcher(
        {
            POPULAR_1: listing(
                item("/post/1", "First", "/t/1.jpg"),
                item("/post/2", "Second"),
                next_href="/popular?page=2",
            )
        }
    )

    page = CatalogWalker(DEMO, fetcher).browse(1)

    assert [entry.id for entry in page] == ["/post/1", "/post/2"]
    assert page.state is CursorState.CONTINUE
    assert page.has_next_page is True
    assert page.next_request.page_number == 2
    assert page.next_url == POPULAR_2
    assert fetcher.calls == [POPULAR_1]


def test_browse_last_page_is_done() -> None:
    fetcher = FakeFetcher({POPULAR_2: listing(item("/post/3", "Third"))})

    page = CatalogWalker(DEMO, fetcher).browse(2)

    assert len(page) == 1
    assert page.state is CursorState.DONE
    assert page.next_url is None


def test_item_missing_link_is_skipped_without_aborting_page() -> None:
    fetcher = FakeFetcher({POPULAR_1: listing(item(None, "Broken"), item("/post/2", "Good"))})

    page = CatalogWalker(DEMO, fetcher).browse(1)

    assert [entry.title for entry in page] == ["Good"]
    assert page.skipped == 1


def test_item_with_relative_link_is_rejected_when_resolution_disabled() -> None:
    rules = replace(DEMO.rules, link=css("a.link", "href", resolve=False))
    source = make_source(rules=rules)
    fetcher = FakeFetcher({POPULAR_1: listing(item("/post/1", "Relative"), item(f"{BASE}/post/2", "Absolute"))})

    page = CatalogWalker(source, fetcher).browse(1)

    assert [entry.id for entry in page] == ["/post/2"]


def test_duplicate_items_on_a_page_are_collapsed() -> None:
    fetcher = FakeFetcher({POPULAR_1: listing(item("/post/1", "A"), item("/post/1", "A again"))})

    page = CatalogWalker(DEMO, fetcher).browse(1)

    assert [entry.title for entry in page] == ["A"]


def test_search_with_default_filter_builds_keyword_url() -> None:
    url = f"{BASE}/search?q=red+dress&page=2"
    fetcher = FakeFetcher({url: listing(item("/post/9", "Red"))})
    filters = FilterModel([FilterGroup("Tag", (("Beach", f"{BASE}/tag/beach/"),))])
    filters.select(0)

    page = CatalogWalker(DEMO, fetcher).search("red dress", filters, page=2)

    assert fetcher.calls == [url]
    assert "red+dress" in fetcher.calls[0]
    assert [entry.id for entry in page] == ["/post/9"]


def test_search_with_selected_filter_ignores_keyword() -> None:
    target = f"{BASE}/tag/beach/"
    fetcher = FakeFetcher({target: listing(item("/post/5", "Beach"))})
    filters = FilterModel([FilterGroup("Tag", (("Beach", target),))])
    filters.select(1)

    page = CatalogWalker(DEMO, fetcher).search("secret-keyword", filters, page=1)

    assert fetcher.calls == [target]
    assert all("secret-keyword" not in call for call in fetcher.calls)
    assert [entry.title for entry in page] == ["Beach"]


def test_filtered_search_reaches_later_pages_by_following_links() -> None:
    target = f"{BASE}/tag/beach/"
    fetcher = FakeFetcher(
        {
            target: listing(item("/post/1", "One"), next_href="/tag/beach/page/2/"),
            f"{BASE}/tag/beach/page/2/": listing(item("/post/2", "Two")),
        }
    )
    filters = FilterModel([FilterGroup("Tag", (("Beach", target),))])
    filters.select(1)

    page = CatalogWalker(DEMO, fetcher).search("ignored", filters, page=2)

    assert [entry.title for entry in page] == ["Two"]
    assert page.state is CursorState.DONE


def test_filtered_search_beyond_last_page_is_empty() -> None:
    target = f"{BASE}/tag/beach/"
    fetcher = FakeFetcher({target: listing(item("/post/1", "One"))})
    filters = FilterModel([FilterGroup("Tag", (("Beach", target),))])
    filters.select(1)

    page = CatalogWalker(DEMO, fetcher).search("", filters, page=3)

    assert len(page) == 0
    assert page.has_next_page is False


def test_latest_uses_first_page_url_then_template() -> None:
    fetcher = FakeFetcher({f"{BASE}/": listing(item("/post/1", "New"), next_href="/page/2")})

    page = CatalogWalker(DEMO, fetcher).latest(1)

    assert fetcher.calls == [f"{BASE}/"]
    assert page.next_url == f"{BASE}/page/2"


def test_latest_unsupported_fails_before_any_request() -> None:
    fetcher = FakeFetcher()
    walker = CatalogWalker(make_source(latest=None), fetcher)

    with pytest.raises(UnsupportedOperation):
        walker.latest(1)
    with pytest.raises(UnsupportedOperation):
        walker.iter_latest()
    assert fetcher.calls == []


def test_iter_browse_walks_pages_in_order_and_dedupes() -> None:
    fetcher = FakeFetcher(
        {
            POPULAR_1: listing(item("/post/1", "A"), item("/post/2", "B"), next_href="/n"),
            POPULAR_2: listing(item("/post/2", "B"), item("/post/3", "C")),
        }
    )

    titles = [entry.title for entry in CatalogWalker(DEMO, fetcher).iter_browse()]

    assert titles == ["A", "B", "C"]


def test_iter_browse_count_driven_issues_exactly_bound_fetches() -> None:
    bound = '<span class="last">3</span>'
    source = make_source(
        popular=Listing("{base_url}/popular?page={page}", pagination=CountPagination(css("span.last")))
    )
    fetcher = FakeFetcher(
        {f"{BASE}/popular?page={n}": listing(item(f"/post/{n}", f"P{n}"), extra=bound) for n in range(1, 6)}
    )

    titles = [entry.title for entry in CatalogWalker(source, fetcher).iter_browse()]

    assert titles == ["P1", "P2", "P3"]
    assert len(fetcher.calls) == 3


def test_iter_browse_is_prefix_safe_on_later_failure() -> None:
    fetcher = FakeFetcher(
        {
            POPULAR_1: listing(item("/post/1", "A"), next_href="/n"),
            POPULAR_2: http_status_error(404, POPULAR_2),
        }
    )
    collected = []

    with pytest.raises(PermanentFetchError) as excinfo:
        for entry in CatalogWalker(DEMO, fetcher).iter_browse():
            collected.append(entry)

    assert [entry.id for entry in collected] == ["/post/1"]
    assert "page 2" in excinfo.value.context


def test_each_walk_gets_a_fresh_cursor() -> None:
    fetcher = FakeFetcher({POPULAR_1: listing(item("/post/1", "A"))})
    walker = CatalogWalker(DEMO, fetcher)

    first = list(walker.iter_browse())
    second = list(walker.iter_browse())

    assert first == second
    assert fetcher.calls == [POPULAR_1, POPULAR_1]


def test_single_page_listing_has_no_later_pages() -> None:
    source = make_source(popular=Listing("{base_url}/top7/"))
    fetcher = FakeFetcher({f"{BASE}/top7/": listing(item("/a", "A"), item("/b", "B"), next_href="/top7/?p=2")})
    walker = CatalogWalker(source, fetcher)

    first = walker.browse(1)
    second = walker.browse(2)

    assert [entry.id for entry in first] == ["/a", "/b"]
    assert first.state is CursorState.DONE
    assert list(second) == []
    assert second.state is CursorState.DONE
    assert list(walker.iter_browse(start_page=2)) == []
    assert fetcher.calls == [f"{BASE}/top7/"]
