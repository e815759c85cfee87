# Copyright (c) 2025-2026 Gowtham Adamane Rao. All Rights Reserved.
#
# Licensed under the Prosperity Public License 3.0.0 (the "License").
# You may not use this file except in compliance with the License.
# You may obtain a copy of the License in the LICENSE file at the root
# of this repository, or at: https://prosperitylicense.com/versions/3.0.0
#
# Commercial use beyond a 30-day trial requires a separate license.
from typing import AbstractSet, Iterable, List

from rich.console import Console

from . import queries
from .catalog import KnownEntityCatalog
from .graph_store import GraphStore
from .models import CatalogEntry

console = Console(stderr=True)


def filter_undiscovered(
    entries: Iterable[CatalogEntry],
    existing_names: AbstractSet[str],
    query: str,
    limit: int
) -> List[CatalogEntry]:
    """
    Catalog entries matching `query` (case-insensitive substring of the name or
    any alias) that are not already in the graph.

    `existing_names` must be lowercased. An entry is excluded when its name or
    ANY of its aliases is already present, even if the query matched a
    different alias.
    """
    if limit <= 0:
        return []
    needle = query.lower()
    matches = []
    for entry in entries:
        keys = [entry.name.lower()] + [alias.lower() for alias in entry.aliases]
        if any(key in existing_names for key in keys):
            continue
        if any(needle in key for key in keys):
            matches.append(entry)
            if len(matches) == limit:
                break
    return matches


class DiscoveryEngine:
    """Finds catalog indications that are missing from the graph."""

    def __init__(self, store: GraphStore, catalog: KnownEntityCatalog):
        self.store = store
        self.catalog = catalog

    def find_undiscovered(self, query: str, limit: int) -> List[CatalogEntry]:
        existing = self.store.read(queries.fetch_existing_names)
        matches = filter_undiscovered(self.catalog, existing, query, limit)
        console.log(f"Found {len(matches)} undiscovered indication(s) for '{query}' ({len(existing)} names already in graph)")
        return matches
