from scrapers.errors import UnsupportedOperation

from .baobua import BAOBUA
from .base import Listing, Source
from .misskon import MISSKON

SOURCES = {source.name: source for source in (BAOBUA, MISSKON)}


def all_sources():
    return list(SOURCES.values())


def get_source(name: str) -> Source:
    try:
        return SOURCES[name.lower()]
    except KeyError:
        raise UnsupportedOperation(f"Unknown source: {name}") from None


def find_source_for_url(url: str):
    for source in SOURCES.values():
        if source.host and source.host.removeprefix("www.") in url:
            return source
    return None


__all__ = ["Listing", "Source", "SOURCES", "all_sources", "get_source", "find_source_for_url"]
