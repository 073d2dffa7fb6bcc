"""Retriever backed by Neo4j's native vector index."""

from __future__ import annotations

import logging
from typing import Any

from neo4j_vector_store.config import Neo4jGraphConfig
from neo4j_vector_store.documents import Document, RetrieverOptions, RetrieverResponse
from neo4j_vector_store.embedding.base import Embedder
from neo4j_vector_store.graph.base import GraphFactory
from neo4j_vector_store.graph.neo4j_client import Neo4jClient

logger = logging.getLogger(__name__)

_VECTOR_QUERY = (
    "CALL db.index.vector.queryNodes($index, $k, $embedding) YIELD node, score "
    "RETURN node.text AS text, "
    "node {.*, text: Null, embedding: Null, id: Null} AS metadata"
)


def _record_to_document(record: dict[str, Any]) -> Document:
    metadata = record.get("metadata") or {}
    return Document(
        text=record["text"],
        metadata={key: value for key, value in metadata.items() if value is not None},
    )


class Neo4jRetriever:
    """Fetch the top-k documents nearest to a query embedding."""

    def __init__(
        self,
        index_id: str,
        embedder: Embedder,
        graph_config: Neo4jGraphConfig,
        embedder_options: dict[str, Any] | None = None,
        graph_factory: GraphFactory = Neo4jClient,
    ) -> None:
        """Initialize the retriever.

        Args:
            index_id: Vector index name to query.
            embedder: Embedding capability used for the query.
            graph_config: Resolved Neo4j connection parameters.
            embedder_options: Options forwarded to the embed call.
            graph_factory: Builds the database client opened per invocation.
        """
        if not index_id:
            raise ValueError("Index id must be a non-empty string.")
        self._index_id = index_id
        self._embedder = embedder
        self._graph_config = graph_config
        self._embedder_options = embedder_options
        self._graph_factory = graph_factory

    @property
    def index_id(self) -> str:
        return self._index_id

    async def retrieve(
        self,
        query: str,
        options: RetrieverOptions | dict[str, Any],
    ) -> RetrieverResponse:
        """Return up to ``k`` documents ranked by the store's similarity score.

        Args:
            query: Query text to embed.
            options: Retriever options; ``k`` must be between 1 and 1000.

        Returns:
            RetrieverResponse with documents in the store's ranking order.

        Raises:
            pydantic.ValidationError: If ``options`` is invalid. Raised before
                any embedding or database call.
            neo4j.exceptions.Neo4jError: If the index does not exist or the
                query fails.
        """
        retriever_options = RetrieverOptions.model_validate(options)

        embeddings = await self._embedder.embed(query, self._embedder_options)

        async with self._graph_factory(self._graph_config) as graph_db:
            result = await graph_db.execute(
                _VECTOR_QUERY,
                {
                    "index": self._index_id,
                    "k": retriever_options.k,
                    "embedding": embeddings[0],
                },
            )

        documents = [_record_to_document(record) for record in result.records]
        logger.info(
            "Retrieved %d documents from %s (k=%d)",
            len(documents),
            self._index_id,
            retriever_options.k,
        )
        return RetrieverResponse(documents=documents)
