"""
sources/baobua.py
BaoBua gallery site. No latest listing; categories are plain listing URLs.
"""

from scrapers.pagination import LinkPagination
from scrapers.rules import ExtractionRuleSet, css
from sources.base import Listing, Source

NEXT_PAGE = css("nav.pagination a.next", "href")

BAOBUA = Source(
    name="baobua",
    base_url="https://www.baobua.net",
    lang="all",
    rules=ExtractionRuleSet(
        catalog_item=css("article.post"),
        title=css("div.read-title"),
        link=css("a.popunder", "href"),
        thumbnail=css("img", "src"),
        detail_title=css("div.breadcrumb-trail > ul.trail-items li.trail-end"),
        detail_tags=css("div.breadcrumb-trail > ul.trail-items li:not(.trail-end):not(.trail-begin)"),
        chapter_link=css("div.breadcrumb-trail li.trail-end > a", "href"),
        chapter_date=css("span.item-metadata.posts-date"),
        date_formats=("%a %b %d %Y",),
        page_count=css("div.nav-links > a.next.page-numbers"),
        page_image=css("div.entry-content.read-details img.wp-image", "src"),
    ),
    popular=Listing("{base_url}?page={page}", pagination=LinkPagination(NEXT_PAGE)),
    search=Listing("{base_url}/?q={query}&page={page}", pagination=LinkPagination(NEXT_PAGE)),
    filter_pagination=LinkPagination(NEXT_PAGE, follow_href=True),
    sub_page_url="{chapter_url}?p={page}",
)
