# Copyright (c) 2025-2026 Gowtham Adamane Rao. All Rights Reserved.
#
# Licensed under the Prosperity Public License 3.0.0 (the "License").
# You may not use this file except in compliance with the License.
# You may obtain a copy of the License in the LICENSE file at the root
# of this repository, or at: https://prosperitylicense.com/versions/3.0.0
#
# Commercial use beyond a 30-day trial requires a separate license.
"""
Region filtering for epidemiology sums.

Region names are open-ended keys: they are never normalized or validated, so
an unrecognized name simply matches no metric.
"""
from typing import Iterable, Iterator, List, Optional

from .config import settings

KNOWN_REGIONS = ("USA", "EU", "APAC")
GLOBAL_REGION = "GLOBAL"


class RegionFilter:
    """An immutable set of region names that keeps the caller's ordering."""

    def __init__(self, names: Iterable[str]):
        # dict.fromkeys de-duplicates while preserving order
        self._names = tuple(dict.fromkeys(names))
        self._lookup = frozenset(self._names)

    def __contains__(self, region: object) -> bool:
        return region in self._lookup

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RegionFilter):
            return NotImplemented
        return self._lookup == other._lookup

    def __hash__(self) -> int:
        return hash(self._lookup)

    def __repr__(self) -> str:
        return f"RegionFilter({list(self._names)!r})"

    @property
    def names(self) -> List[str]:
        """Region names as a list, suitable for a Cypher `IN $regions` parameter."""
        return list(self._names)


def region_filter(regions: Optional[Iterable[str]] = None) -> RegionFilter:
    """
    Builds the filter for a request.
    `None` means no preference and selects the configured defaults; an explicitly
    empty collection selects nothing. A bare string is a single region name.
    """
    if isinstance(regions, RegionFilter):
        return regions
    if regions is None:
        return RegionFilter(settings.default_regions)
    if isinstance(regions, str):
        return RegionFilter([regions])
    return RegionFilter(regions)


def parse_regions(value: Optional[str]) -> Optional[List[str]]:
    """Splits a comma-separated region option ('USA,EU'), dropping blank parts."""
    if value is None:
        return None
    return [part.strip() for part in value.split(",") if part.strip()]
