from __future__ import annotations

from dataclasses import replace

from fetcher.document import Document
from scrapers.errors import http_status_error
from scrapers.pagination import LinkPagination
from scrapers.rules import ExtractionRuleSet, css
from sources.base import Listing, Source

BASE = "https://demo.example"


class FakeFetcher:
    """Serves fixture HTML by URL; an Exception value is raised instead."""

    def __init__(self, pages=None):
        self.pages = dict(pages or {})
        self.calls: list[str] = []
        self.on_fetch = None

    def fetch(self, url, headers=None):
        self.calls.append(url)
        if self.on_fetch is not None:
            self.on_fetch(url)
        body = self.pages.get(url)
        if body is None:
            raise http_status_error(404, url)
        if isinstance(body, Exception):
            raise body
        return Document.parse(body, url)

    def close(self):
        pass


DEMO_RULES = ExtractionRuleSet(
    catalog_item=css("div.item"),
    title=css("h2"),
    link=css("a.link", "href"),
    thumbnail=css("img", "src"),
    detail_title=css("h1.title"),
    detail_tags=css("ul.tags li"),
    chapter_link=css('link[rel="canonical"]', "href"),
    chapter_date=css("time.published"),
    date_formats=("%Y-%m-%d",),
    page_count=css("nav.pages a.page"),
    page_image=css("div.gallery img", "src"),
)

NEXT = css("a.next", "href")

DEMO = Source(
    name="demo",
    base_url=BASE,
    lang="en",
    rules=DEMO_RULES,
    popular=Listing("{base_url}/popular?page={page}", pagination=LinkPagination(NEXT)),
    latest=Listing("{base_url}/page/{page}", first_url="{base_url}/", pagination=LinkPagination(NEXT)),
    search=Listing("{base_url}/search?q={query}&page={page}", pagination=LinkPagination(NEXT)),
    filter_pagination=LinkPagination(NEXT, follow_href=True),
    sub_page_url="{chapter_url}?p={page}",
)


def make_source(**overrides) -> Source:
    return replace(DEMO, **overrides)


def item(href, title, thumb=None):
    link = f'<a class="link" href="{href}">open</a>' if href is not None else ""
    heading = f"<h2>{title}</h2>" if title is not None else ""
    img = f'<img src="{thumb}">' if thumb else ""
    return f'<div class="item">{heading}{link}{img}</div>'


def listing(*items, next_href=None, extra=""):
    nav = f'<a class="next" href="{next_href}">Next</a>' if next_href else ""
    return f"<html><body>{''.join(items)}{nav}{extra}</body></html>"


def gallery(canonical, images, page_links=0, title="Gallery", tags=(), published=None):
    head = f'<link rel="canonical" href="{canonical}">' if canonical else ""
    nav = "".join(f'<a class="page" href="#">{n}</a>' for n in range(1, page_links + 1))
    tag_html = "".join(f"<li>{t}</li>" for t in tags)
    date = f'<time class="published">{published}</time>' if published else ""
    imgs = "".join(f'<img src="{src}">' for src in images)
    heading = f'<h1 class="title">{title}</h1>' if title else ""
    return (
        f"<html><head>{head}</head><body>{heading}<ul class=\"tags\">{tag_html}</ul>{date}"
        f'<nav class="pages">{nav}</nav><div class="gallery">{imgs}</div></body></html>'
    )
