"""Indexer that writes embedded documents as labelled Neo4j nodes."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from neo4j_vector_store.config import Neo4jGraphConfig
from neo4j_vector_store.documents import Document, IndexerOptions
from neo4j_vector_store.embedding.base import Embedder
from neo4j_vector_store.graph.base import GraphFactory
from neo4j_vector_store.graph.neo4j_client import Neo4jClient

logger = logging.getLogger(__name__)

BATCH_SIZE = 1000
EMBED_CONCURRENCY = 16


def _batch(rows: list[dict[str, Any]], batch_size: int) -> list[list[dict[str, Any]]]:
    return [
        rows[index : index + batch_size] for index in range(0, len(rows), batch_size)
    ]


def _create_nodes_query(index_id: str) -> str:
    return (
        "UNWIND $data AS row "
        f"CREATE (t:`{index_id}`) "
        "SET t += row.metadata, t.text = row.text "
        "WITH t, row.embedding AS embedding "
        "CALL db.create.setNodeVectorProperty(t, 'embedding', embedding)"
    )


def _create_index_query(index_id: str) -> str:
    return (
        "CREATE VECTOR INDEX $indexName IF NOT EXISTS "
        f"FOR (n:`{index_id}`) ON n.embedding"
    )


class Neo4jIndexer:
    """Persist documents as embedded nodes and ensure their vector index.

    The index identifier is interpolated into the label position of the
    statements and must come from trusted configuration.
    """

    def __init__(
        self,
        index_id: str,
        embedder: Embedder,
        graph_config: Neo4jGraphConfig,
        embedder_options: dict[str, Any] | None = None,
        graph_factory: GraphFactory = Neo4jClient,
        batch_size: int = BATCH_SIZE,
        embed_concurrency: int = EMBED_CONCURRENCY,
    ) -> None:
        """Initialize the indexer.

        Args:
            index_id: Node label and vector index name.
            embedder: Embedding capability used for every document.
            graph_config: Resolved Neo4j connection parameters.
            embedder_options: Options forwarded to each embed call.
            graph_factory: Builds the database client opened per invocation.
            batch_size: Maximum number of documents per write statement.
            embed_concurrency: Maximum number of embed calls in flight.
        """
        if not index_id:
            raise ValueError("Index id must be a non-empty string.")
        if batch_size <= 0:
            raise ValueError("Batch size must be > 0.")
        if embed_concurrency <= 0:
            raise ValueError("Embed concurrency must be > 0.")
        self._index_id = index_id
        self._embedder = embedder
        self._graph_config = graph_config
        self._embedder_options = embedder_options
        self._graph_factory = graph_factory
        self._batch_size = batch_size
        self._embed_concurrency = embed_concurrency

    @property
    def index_id(self) -> str:
        return self._index_id

    async def index(
        self,
        documents: list[Document],
        options: IndexerOptions | dict[str, Any] | None = None,
    ) -> None:
        """Embed documents and write them to Neo4j.

        All embeddings are computed before the first write. Documents are
        then written in chunks of ``batch_size``, one statement per chunk,
        followed by a single idempotent vector index creation.

        Raises:
            ValueError: If the list is empty or a document has no text.
            pydantic.ValidationError: If ``options`` is invalid.
        """
        IndexerOptions.model_validate(options or {})
        if not documents:
            raise ValueError("At least one document is required for indexing.")
        for position, document in enumerate(documents):
            if not document.text:
                raise ValueError(f"Document at position {position} has no text.")

        embeddings = await self._embed_all(documents)

        rows = [
            {
                "text": document.text,
                "metadata": document.metadata,
                "embedding": embedding[0],
            }
            for document, embedding in zip(documents, embeddings, strict=True)
        ]

        create_query = _create_nodes_query(self._index_id)
        async with self._graph_factory(self._graph_config) as graph_db:
            chunks = _batch(rows, self._batch_size)
            for number, chunk in enumerate(chunks, start=1):
                await graph_db.execute(create_query, {"data": chunk})
                logger.debug(
                    "Wrote chunk %d/%d (%d nodes) to %s",
                    number,
                    len(chunks),
                    len(chunk),
                    self._index_id,
                )
            await graph_db.execute(
                _create_index_query(self._index_id),
                {"indexName": self._index_id},
            )

        logger.info("Indexed %d documents into %s", len(rows), self._index_id)

    async def _embed_all(self, documents: list[Document]) -> list[list[list[float]]]:
        """Embed every document with at most ``embed_concurrency`` calls in flight.

        The first failure cancels the remaining calls and is re-raised as is.
        """
        semaphore = asyncio.Semaphore(self._embed_concurrency)

        async def _embed_one(text: str) -> list[list[float]]:
            async with semaphore:
                return await self._embedder.embed(text, self._embedder_options)

        try:
            async with asyncio.TaskGroup() as group:
                tasks = [
                    group.create_task(_embed_one(document.text))
                    for document in documents
                ]
        except ExceptionGroup as exc_group:
            raise exc_group.exceptions[0] from None
        return [task.result() for task in tasks]
