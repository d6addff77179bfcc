"""
scrapers/models.py
Normalized records handed to the host application.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Iterator, Optional, Tuple


class CursorState(Enum):
    START = "start"
    FETCHING = "fetching"
    CONTINUE = "continue"
    DONE = "done"
    ABORTED = "aborted"


@dataclass(frozen=True)
class CatalogEntry:
    """One item of a catalog listing, keyed by its canonical URL path."""

    id: str
    title: str
    thumbnail_url: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class EntryDetail:
    title: str
    tags: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {"title": self.title, "tags": list(self.tags)}


@dataclass(frozen=True)
class ChapterRef:
    """The single virtual chapter covering an entry's whole gallery."""

    id: str
    display_label: str
    published_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "display_label": self.display_label,
            "published_at": self.published_at.isoformat() if self.published_at else None,
        }


@dataclass(frozen=True)
class PageRef:
    index: int
    image_url: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class FilterOption:
    display_name: str
    target_url: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class PageRequest:
    url: str
    page_number: int


@dataclass(frozen=True)
class CatalogPage:
    """Entries of one fetched listing page plus where the walk would go next."""

    entries: Tuple[CatalogEntry, ...]
    page_number: int
    state: CursorState
    next_request: Optional[PageRequest] = None
    skipped: int = field(default=0, compare=False)

    @property
    def has_next_page(self) -> bool:
        return self.state is CursorState.CONTINUE

    @property
    def next_url(self) -> Optional[str]:
        return self.next_request.url if self.next_request else None

    def __iter__(self) -> Iterator[CatalogEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def to_dict(self) -> dict:
        return {
            "entries": [entry.to_dict() for entry in self.entries],
            "page": self.page_number,
            "has_next_page": self.has_next_page,
            "next_url": self.next_url,
        }
