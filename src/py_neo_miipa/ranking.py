# Copyright (c) 2025-2026 Gowtham Adamane Rao. All Rights Reserved.
#
# Licensed under the Prosperity Public License 3.0.0 (the "License").
# You may not use this file except in compliance with the License.
# You may obtain a copy of the License in the LICENSE file at the root
# of this repository, or at: https://prosperitylicense.com/versions/3.0.0
#
# Commercial use beyond a 30-day trial requires a separate license.
from enum import Enum
from typing import Callable, Iterable, List, Mapping, Optional, TypeVar

from pydantic import BaseModel


class SortBy(str, Enum):
    PREVALENCE = "prevalence"
    INCIDENCE = "incidence"
    ALPHABETICAL = "alphabetical"
    ACTIONABILITY = "actionability"

class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


R = TypeVar("R", bound=BaseModel)


def default_order(sort_by: SortBy) -> SortOrder:
    """Alphabetical lists read A→Z by default; numeric rankings put the largest first."""
    return SortOrder.ASC if SortBy(sort_by) == SortBy.ALPHABETICAL else SortOrder.DESC

def _name_key(item) -> tuple:
    return (item.name.casefold(), item.name)

def sort_ranked(
    items: Iterable[R],
    sort_by: SortBy,
    order: Optional[SortOrder],
    keys: Mapping[SortBy, Callable[[R], float]]
) -> List[R]:
    """
    Orders items by a numeric key from `keys`, or by name for alphabetical.

    Equal numeric values are always ordered by name ascending, whatever the
    requested direction. Raises ValueError for a key the entity type does not
    support.
    """
    sort_by = SortBy(sort_by)
    order = SortOrder(order) if order is not None else default_order(sort_by)
    descending = order == SortOrder.DESC

    ordered = sorted(items, key=_name_key)
    if sort_by == SortBy.ALPHABETICAL:
        return list(reversed(ordered)) if descending else ordered

    if sort_by not in keys:
        raise ValueError(f"Unsupported sort key '{sort_by.value}'. Expected one of: {', '.join(k.value for k in keys)}, alphabetical")
    # sorted() is stable, including with reverse=True, so the name order survives among ties
    return sorted(ordered, key=keys[sort_by], reverse=descending)

def assign_ranks(items: List[R]) -> List[R]:
    """Stamps the 1-based list position onto each item."""
    for position, item in enumerate(items, start=1):
        item.rank = position
    return items
