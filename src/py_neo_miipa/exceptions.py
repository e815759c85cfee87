# Copyright (c) 2025-2026 Gowtham Adamane Rao. All Rights Reserved.
#
# Licensed under the Prosperity Public License 3.0.0 (the "License").
# You may not use this file except in compliance with the License.
# You may obtain a copy of the License in the LICENSE file at the root
# of this repository, or at: https://prosperitylicense.com/versions/3.0.0
#
# Commercial use beyond a 30-day trial requires a separate license.
"""Errors raised by the MIIPA graph core."""


class MiipaError(Exception):
    """Base class for all errors raised by this package."""


class NotFoundError(MiipaError):
    """An indication or mutation id has no matching node in the graph."""

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} '{entity_id}' not found")


class UnknownCatalogEntryError(MiipaError):
    """A research import was requested for a name the catalog does not know."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Indication \"{name}\" not found in known oncology indications")


class StoreUnavailableError(MiipaError):
    """
    The graph store could not be reached, or a query failed at the transport level.
    Callers may retry; the core itself never does.
    """


class IngestionError(MiipaError):
    """A research import could not be written completely and was rolled back."""


class GraphDataError(MiipaError):
    """A node read from the graph does not deserialize into its typed record."""
