from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from types import TracebackType
from typing import Any, Self

from neo4j_vector_store.config import Neo4jGraphConfig


@dataclass
class QueryResult:
    """Result from executing a Cypher query."""

    records: list[dict[str, Any]]
    summary: dict[str, Any]


class GraphDatabase(ABC):
    """Abstract interface for graph database operations.

    Implementations are async context managers: the connection is opened on
    entry and closed on exit.
    """

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        return None

    @abstractmethod
    async def execute(
        self, cypher: str, params: dict[str, Any] | None = None
    ) -> QueryResult:
        """Execute a Cypher query.

        Raises:
            neo4j.exceptions.Neo4jError: If the database rejects the query.
        """
        ...


GraphFactory = Callable[[Neo4jGraphConfig], GraphDatabase]
