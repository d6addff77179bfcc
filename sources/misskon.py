"""
sources/misskon.py
MissKon gallery site. Rate limited to 10 requests/second and served a
mobile user agent. Text search is ignored while a tag is selected.
"""

from fetcher.rate_limit import RateLimit
from scrapers.filters import FilterGroup
from scrapers.pagination import LinkPagination
from scrapers.rules import ExtractionRuleSet, css
from sources.base import Listing, Source

SEARCH_NEXT_PAGE = css("div.content > div.pagination > span.current + a", "href")

TAGS = (
    FilterGroup(
        "Top",
        (
            ("Top 3 days", "https://misskon.com/top3/"),
            ("Top 7 days", "https://misskon.com/top7/"),
            ("Top 30 days", "https://misskon.com/top30/"),
            ("Top 60 days", "https://misskon.com/top60/"),
        ),
    ),
    FilterGroup(
        "China",
        (
            ("[MTCos] 喵糖映画", "https://misskon.com/tag/mtcos/"),
            ("BoLoli", "https://misskon.com/tag/bololi/"),
            ("CANDY", "https://misskon.com/tag/candy/"),
            ("FEILIN", "https://misskon.com/tag/feilin/"),
            ("FToow", "https://misskon.com/tag/ftoow/"),
            ("GIRLT", "https://misskon.com/tag/girlt/"),
            ("HuaYan", "https://misskon.com/tag/huayan/"),
            ("HuaYang", "https://misskon.com/tag/huayang/"),
            ("IMISS", "https://misskon.com/tag/imiss/"),
            ("ISHOW", "https://misskon.com/tag/ishow/"),
            ("JVID", "https://misskon.com/tag/jvid/"),
            ("KelaGirls", "https://misskon.com/tag/kelagirls/"),
            ("Kimoe", "https://misskon.com/tag/kimoe/"),
            ("LegBaby", "https://misskon.com/tag/legbaby/"),
            ("MF", "https://misskon.com/tag/mf/"),
            ("MFStar", "https://misskon.com/tag/mfstar/"),
            ("MiiTao", "https://misskon.com/tag/miitao/"),
            ("MintYe", "https://misskon.com/tag/mintye/"),
            ("MISSLEG", "https://misskon.com/tag/missleg/"),
            ("MiStar", "https://misskon.com/tag/mistar/"),
            ("MTMeng", "https://misskon.com/tag/mtmeng/"),
            ("MyGirl", "https://misskon.com/tag/mygirl/"),
            ("PartyCat", "https://misskon.com/tag/partycat/"),
            ("QingDouKe", "https://misskon.com/tag/qingdouke/"),
            ("RuiSG", "https://misskon.com/tag/ruisg/"),
            ("SLADY", "https://misskon.com/tag/slady/"),
            ("TASTE", "https://misskon.com/tag/taste/"),
            ("TGOD", "https://misskon.com/tag/tgod/"),
            ("TouTiao", "https://misskon.com/tag/toutiao/"),
            ("TuiGirl", "https://misskon.com/tag/tuigirl/"),
            ("Tukmo", "https://misskon.com/tag/tukmo/"),
            ("UGIRLS", "https://misskon.com/tag/ugirls/"),
            ("UGIRLS - Ai You Wu App", "https://misskon.com/tag/ugirls-ai-you-wu-app/"),
            ("UXING", "https://misskon.com/tag/uxing/"),
            ("WingS", "https://misskon.com/tag/wings/"),
            ("XiaoYu", "https://misskon.com/tag/xiaoyu/"),
            ("XingYan", "https://misskon.com/tag/xingyan/"),
            ("XIUREN", "https://misskon.com/tag/xiuren/"),
            ("XR Uncensored", "https://misskon.com/tag/xr-uncensored/"),
            ("YouMei", "https://misskon.com/tag/youmei/"),
            ("YouMi", "https://misskon.com/tag/youmi/"),
            ("YouMi尤蜜", "https://misskon.com/tag/youmiapp/"),
            ("YouWu", "https://misskon.com/tag/youwu/"),
        ),
    ),
    FilterGroup(
        "Korea",
        (
            ("AG", "https://misskon.com/tag/ag/"),
            ("Bimilstory", "https://misskon.com/tag/bimilstory/"),
            ("BLUECAKE", "https://misskon.com/tag/bluecake/"),
            ("CreamSoda", "https://misskon.com/tag/creamsoda/"),
            ("DJAWA", "https://misskon.com/tag/djawa/"),
            ("Espacia Korea", "https://misskon.com/tag/espacia-korea/"),
            ("Fantasy Factory", "https://misskon.com/tag/fantasy-factory/"),
            ("Fantasy Story", "https://misskon.com/tag/fantasy-story/"),
            ("Glamarchive", "https://misskon.com/tag/glamarchive/"),
            ("HIGH FANTASY", "https://misskon.com/tag/high-fantasy/"),
            ("KIMLEMON", "https://misskon.com/tag/kimlemon/"),
            ("KIREI", "https://misskon.com/tag/kirei/"),
            ("KiSiA", "https://misskon.com/tag/kisia/"),
            ("Korean Realgraphic", "https://misskon.com/tag/korean-realgraphic/"),
            ("Lilynah", "https://misskon.com/tag/lilynah/"),
            ("Lookas", "https://misskon.com/tag/lookas/"),
            ("Loozy", "https://misskon.com/tag/loozy/"),
            ("Moon Night Snap", "https://misskon.com/tag/moon-night-snap/"),
            ("Paranhosu", "https://misskon.com/tag/paranhosu/"),
            ("PhotoChips", "https://misskon.com/tag/photochips/"),
            ("Pure Media", "https://misskon.com/tag/pure-media/"),
            ("PUSSYLET", "https://misskon.com/tag/pussylet/"),
            ("SAINT Photolife", "https://misskon.com/tag/saint-photolife/"),
            ("SWEETBOX", "https://misskon.com/tag/sweetbox/"),
            ("UHHUNG MAGAZINE", "https://misskon.com/tag/uhhung-magazine/"),
            ("UMIZINE", "https://misskon.com/tag/umizine/"),
            ("WXY ENT", "https://misskon.com/tag/wxy-ent/"),
            ("Yo-U", "https://misskon.com/tag/yo-u/"),
        ),
    ),
    FilterGroup(
        "Other",
        (
            ("AI Generated", "https://misskon.com/tag/ai-generated/"),
            ("Cosplay", "https://misskon.com/tag/cosplay/"),
            ("JP", "https://misskon.com/tag/jp/"),
            ("JVID", "https://misskon.com/tag/jvid/"),
            ("Patreon", "https://misskon.com/tag/patreon/"),
        ),
    ),
)

MISSKON = Source(
    name="misskon",
    base_url="https://misskon.com",
    lang="zh",
    rules=ExtractionRuleSet(
        catalog_item=css("article.item-list"),
        title=css(".post-box-title"),
        link=css(".post-box-title a", "href"),
        thumbnail=css(".post-thumbnail img", "data-src"),
        detail_title=css("article > .post-inner .post-title"),
        detail_tags=css("article > .post-inner .post-tag > a"),
        chapter_link=css('link[rel="canonical"]', "href"),
        # upload date is only visible in the image path: .../2024/01/31/...
        chapter_date=css(".entry img", "data-src", pattern=r"(\d{4}/\d{2}/\d{2})"),
        date_formats=("%Y/%m/%d",),
        page_count=css("div.post-inner div.page-link:nth-child(1) .post-page-numbers"),
        page_image=css("div.post-inner > div.entry > p > img", "data-src"),
    ),
    popular=Listing("{base_url}/top7/"),
    latest=Listing(
        "{base_url}/page/{page}",
        first_url="{base_url}",
        pagination=LinkPagination(css(".current + a.page")),
    ),
    search=Listing("{base_url}/page/{page}/?s={query}", pagination=LinkPagination(SEARCH_NEXT_PAGE)),
    filter_pagination=LinkPagination(SEARCH_NEXT_PAGE, follow_href=True),
    filter_groups=TAGS,
    sub_page_url="{chapter_url}{page}/",
    rate_limit=RateLimit(requests=10, period=1.0),
    user_agent="mobile",
)
