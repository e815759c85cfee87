# Copyright (c) 2025-2026 Gowtham Adamane Rao. All Rights Reserved.
#
# Licensed under the Prosperity Public License 3.0.0 (the "License").
# You may not use this file except in compliance with the License.
# You may obtain a copy of the License in the LICENSE file at the root
# of this repository, or at: https://prosperitylicense.com/versions/3.0.0
#
# Commercial use beyond a 30-day trial requires a separate license.
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar

from neo4j import Driver, GraphDatabase, ManagedTransaction
from neo4j.exceptions import ServiceUnavailable, SessionExpired, TransientError
from pydantic import BaseModel, ValidationError
from rich.console import Console

from .config import settings
from .exceptions import GraphDataError, StoreUnavailableError

console = Console(stderr=True)

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

# Driver errors that mean the store itself is unreachable rather than the query being wrong
_UNAVAILABLE_ERRORS = (ServiceUnavailable, SessionExpired, TransientError)


class GraphStore:
    """
    Thin access layer over a Neo4j driver.

    Every call opens its own session and closes it on exit, whatever the outcome.
    Units of work passed to `read`/`write` run inside a single managed transaction.
    """

    def __init__(self, driver: Driver, database: Optional[str] = None):
        self.driver = driver
        self.database = database or settings.neo4j_database

    @classmethod
    def from_settings(cls) -> "GraphStore":
        driver = GraphDatabase.driver(settings.neo4j_uri, auth=(settings.neo4j_user, settings.neo4j_password))
        return cls(driver, settings.neo4j_database)

    def close(self):
        self.driver.close()

    def read(self, work: Callable[[ManagedTransaction], T]) -> T:
        """Runs `work` in a read-only transaction."""
        try:
            with self.driver.session(database=self.database) as session:
                return session.execute_read(work)
        except _UNAVAILABLE_ERRORS as e:
            raise StoreUnavailableError(f"Graph store unavailable: {e}") from e

    def write(self, work: Callable[[ManagedTransaction], T]) -> T:
        """
        Runs `work` in a single write transaction. Any exception raised by `work`
        rolls back every statement it issued.
        """
        try:
            with self.driver.session(database=self.database) as session:
                return session.execute_write(work)
        except _UNAVAILABLE_ERRORS as e:
            raise StoreUnavailableError(f"Graph store unavailable: {e}") from e

    def execute(self, query: str, params: Optional[dict] = None):
        """Helper to run a standalone statement (schema statements, mostly)."""
        try:
            self.driver.execute_query(query, parameters_=params, database_=self.database)
        except _UNAVAILABLE_ERRORS as e:
            raise StoreUnavailableError(f"Graph store unavailable: {e}") from e


def fetch(tx: ManagedTransaction, query: str, **params: Any) -> List[Dict[str, Any]]:
    """
    Runs a query and materializes every record as a dict.
    Nodes become plain property dicts; absent optional matches come back as None.
    """
    result = tx.run(query, params)
    return [record.data() for record in result]


def to_model(model: Type[M], props: Dict[str, Any]) -> M:
    """Deserializes node properties into a typed record, or fails loudly."""
    try:
        return model.model_validate(props)
    except ValidationError as e:
        raise GraphDataError(f"Invalid {model.__name__} node {props.get('id', '')!r}: {e}") from e
