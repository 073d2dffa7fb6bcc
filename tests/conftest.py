from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from dotenv import load_dotenv
from neo4j.exceptions import ClientError

from neo4j_vector_store.config import Neo4jGraphConfig
from neo4j_vector_store.embedding.base import Embedder
from neo4j_vector_store.graph.base import GraphDatabase, QueryResult


def pytest_configure() -> None:
    """Load .env for integration tests without overriding existing env vars."""
    repo_root = Path(__file__).resolve().parents[1]
    load_dotenv(repo_root / ".env", override=False)


@pytest.fixture
def anyio_backend() -> str:
    """The library is asyncio-based; run anyio tests on asyncio only."""
    return "asyncio"


class FakeEmbedder(Embedder):
    """Deterministic embedder recording every call."""

    def __init__(self, dimensions: int = 3) -> None:
        self.calls: list[tuple[str | list[str], dict[str, Any] | None]] = []
        self._dimensions = dimensions

    async def embed(
        self,
        content: str | list[str],
        options: dict[str, Any] | None = None,
    ) -> list[list[float]]:
        self.calls.append((content, options))
        texts = [content] if isinstance(content, str) else content
        return [
            [float(len(text) + offset) for offset in range(self._dimensions)]
            for text in texts
        ]


class InMemoryGraph(GraphDatabase):
    """Graph database fake emulating the node writes and vector queries.

    Nodes are kept per label in ``nodes``; vector indexes are created on
    demand and queried in insertion order.
    """

    def __init__(self) -> None:
        self.nodes: dict[str, list[dict[str, Any]]] = {}
        self.indexes: set[str] = set()
        self.queries: list[tuple[str, dict[str, Any]]] = []
        self.opened = 0
        self.closed = 0
        self.fail_on_call: int | None = None

    def factory(self, config: Neo4jGraphConfig) -> InMemoryGraph:
        return self

    async def __aenter__(self) -> InMemoryGraph:
        self.opened += 1
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        self.closed += 1

    async def execute(
        self, cypher: str, params: dict[str, Any] | None = None
    ) -> QueryResult:
        params = params or {}
        self.queries.append((cypher, params))
        if self.fail_on_call is not None and len(self.queries) == self.fail_on_call:
            raise ClientError("write failed")

        if "setNodeVectorProperty" in cypher:
            label = cypher.split("CREATE (t:`", 1)[1].split("`", 1)[0]
            for row in params["data"]:
                node = {**row["metadata"], "text": row["text"]}
                node["embedding"] = row["embedding"]
                self.nodes.setdefault(label, []).append(node)
            return QueryResult(records=[], summary={"query_type": "w"})

        if "CREATE VECTOR INDEX" in cypher:
            self.indexes.add(params["indexName"])
            return QueryResult(records=[], summary={"query_type": "s"})

        if "db.index.vector.queryNodes" in cypher:
            index = params["index"]
            if index not in self.indexes:
                raise ClientError(f"There is no such vector schema index: {index}")
            records = [
                {
                    "text": node["text"],
                    "metadata": {
                        **node,
                        "text": None,
                        "embedding": None,
                        "id": None,
                    },
                }
                for node in self.nodes.get(index, [])[: params["k"]]
            ]
            return QueryResult(records=records, summary={"query_type": "r"})

        raise AssertionError(f"Unexpected query: {cypher}")


@pytest.fixture
def embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture
def graph() -> InMemoryGraph:
    return InMemoryGraph()


@pytest.fixture
def graph_config() -> Neo4jGraphConfig:
    return Neo4jGraphConfig(
        url="bolt://localhost:7687", username="neo4j", password="secret"
    )
