"""
scrapers/filters.py
Single-slot tag/category filter. Selecting anything but option 0 replaces
free-text search with the option's fixed listing URL.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

from scrapers.errors import InvalidFilterIndex
from scrapers.models import FilterOption


@dataclass(frozen=True)
class FilterGroup:
    """Organizational label for a run of options; flattened by build_options."""

    label: str
    options: Tuple[Tuple[str, str], ...]


class FilterModel:
    def __init__(self, groups: Sequence[FilterGroup] = (), none_label: str = "None"):
        self.groups = tuple(groups)
        self.none_label = none_label
        self._options = self.build_options()
        self._selected = 0

    def build_options(self) -> Tuple[FilterOption, ...]:
        options = [FilterOption(self.none_label, None)]
        for group in self.groups:
            for name, url in group.options:
                options.append(FilterOption(f"{group.label}:{name}", url))
        return tuple(options)

    @property
    def options(self) -> Tuple[FilterOption, ...]:
        return self._options

    def __len__(self) -> int:
        return len(self._options)

    def select(self, index: int) -> FilterOption:
        if not 0 <= index < len(self._options):
            raise InvalidFilterIndex(index, len(self._options))
        self._selected = index
        return self._options[index]

    @property
    def selected_index(self) -> int:
        return self._selected

    @property
    def selected(self) -> FilterOption:
        return self._options[self._selected]

    def is_overriding_query(self) -> bool:
        return self._selected != 0

    def copy(self) -> "FilterModel":
        """Fresh model over the same groups, with option 0 selected."""
        return FilterModel(self.groups, self.none_label)
