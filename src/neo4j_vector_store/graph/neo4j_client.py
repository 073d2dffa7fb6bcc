import logging
from types import TracebackType
from typing import Any

from neo4j import AsyncDriver, NotificationDisabledClassification
from neo4j import AsyncGraphDatabase as Neo4jAsyncGraphDatabase

from neo4j_vector_store.config import Neo4jGraphConfig
from neo4j_vector_store.graph.base import GraphDatabase, QueryResult

logger = logging.getLogger(__name__)


class Neo4jClient(GraphDatabase):
    """Async Neo4j client owning one driver for the lifetime of a context."""

    def __init__(self, config: Neo4jGraphConfig) -> None:
        """Initialize with resolved connection parameters."""
        self._config = config
        self._driver: AsyncDriver | None = None

    async def __aenter__(self) -> "Neo4jClient":
        """Open the driver on context entry."""
        self._driver = Neo4jAsyncGraphDatabase.driver(
            self._config.url,
            auth=(self._config.username, self._config.password),
            notifications_disabled_classifications=[
                NotificationDisabledClassification.DEPRECATION,
                NotificationDisabledClassification.GENERIC,
            ],
        )
        logger.debug("Opened Neo4j driver for %s", self._config.url)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Close the driver on context exit."""
        if self._driver:
            await self._driver.close()
            self._driver = None

    @property
    def _active_driver(self) -> AsyncDriver:
        """Return the driver, raising if not connected."""
        if self._driver is None:
            raise RuntimeError(
                "Client is not connected. Use 'async with Neo4jClient(...)' to connect."
            )
        return self._driver

    async def execute(
        self, cypher: str, params: dict[str, Any] | None = None
    ) -> QueryResult:
        """Execute a Cypher query and return records with summary.

        Each call runs in its own auto-commit transaction, so a statement is
        applied atomically. Driver errors propagate unchanged.
        """
        async with self._active_driver.session(
            database=self._config.database
        ) as session:
            result = await session.run(cypher, params or {})
            records = await result.data()
            summary = await result.consume()
        return QueryResult(
            records=records,
            summary={
                "query_type": summary.query_type,
                "nodes_created": summary.counters.nodes_created,
            },
        )
