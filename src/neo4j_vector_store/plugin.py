"""Registration of Neo4j indexers and retrievers by index id."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from neo4j_vector_store.config import (
    Neo4jGraphConfig,
    Neo4jSettings,
    resolve_graph_config,
)
from neo4j_vector_store.documents import (
    Document,
    IndexerOptions,
    RetrieverOptions,
    RetrieverResponse,
)
from neo4j_vector_store.embedding.base import Embedder
from neo4j_vector_store.graph.base import GraphFactory
from neo4j_vector_store.graph.neo4j_client import Neo4jClient
from neo4j_vector_store.indexer import EMBED_CONCURRENCY, Neo4jIndexer
from neo4j_vector_store.retriever import Neo4jRetriever

PLUGIN_NAME = "neo4j"


@dataclass(frozen=True)
class ActionRef:
    """Reference to a registered indexer or retriever."""

    name: str
    label: str
    config_schema: type[BaseModel] | None = None


@dataclass
class Neo4jPluginParams:
    """Configuration for one index id."""

    index_id: str
    embedder: Embedder
    embedder_options: dict[str, Any] | None = None
    client_params: Neo4jGraphConfig | None = None
    embed_concurrency: int = EMBED_CONCURRENCY


def _action_name(index_id: str) -> str:
    return f"{PLUGIN_NAME}/{index_id}"


def neo4j_retriever_ref(index_id: str, display_name: str | None = None) -> ActionRef:
    """Create a reference to the Neo4j retriever for ``index_id``.

    The label defaults to ``Neo4j - <index_id>``.
    """
    return ActionRef(
        name=_action_name(index_id),
        label=display_name or f"Neo4j - {index_id}",
        config_schema=RetrieverOptions,
    )


def neo4j_indexer_ref(index_id: str, display_name: str | None = None) -> ActionRef:
    """Create a reference to the Neo4j indexer for ``index_id``."""
    return ActionRef(
        name=_action_name(index_id),
        label=display_name or f"Neo4j - {index_id}",
        config_schema=IndexerOptions,
    )


class Neo4jPlugin:
    """Holds the indexers and retrievers configured for each index id."""

    name = PLUGIN_NAME

    def __init__(self) -> None:
        self._retrievers: dict[str, Neo4jRetriever] = {}
        self._indexers: dict[str, Neo4jIndexer] = {}

    def register_retriever(self, retriever: Neo4jRetriever) -> ActionRef:
        ref = neo4j_retriever_ref(retriever.index_id)
        self._retrievers[ref.name] = retriever
        return ref

    def register_indexer(self, indexer: Neo4jIndexer) -> ActionRef:
        ref = neo4j_indexer_ref(indexer.index_id)
        self._indexers[ref.name] = indexer
        return ref

    def retriever(self, ref: ActionRef | str) -> Neo4jRetriever:
        """Look up a retriever by reference or name.

        Raises:
            KeyError: If no retriever is registered under that name.
        """
        name = ref.name if isinstance(ref, ActionRef) else ref
        try:
            return self._retrievers[name]
        except KeyError:
            raise KeyError(f"Unknown retriever: {name}") from None

    def indexer(self, ref: ActionRef | str) -> Neo4jIndexer:
        """Look up an indexer by reference or name.

        Raises:
            KeyError: If no indexer is registered under that name.
        """
        name = ref.name if isinstance(ref, ActionRef) else ref
        try:
            return self._indexers[name]
        except KeyError:
            raise KeyError(f"Unknown indexer: {name}") from None

    async def index(
        self,
        indexer: ActionRef | str,
        documents: list[Document],
        options: IndexerOptions | dict[str, Any] | None = None,
    ) -> None:
        await self.indexer(indexer).index(documents, options)

    async def retrieve(
        self,
        retriever: ActionRef | str,
        query: str,
        options: RetrieverOptions | dict[str, Any],
    ) -> RetrieverResponse:
        return await self.retriever(retriever).retrieve(query, options)


def configure_neo4j_retriever(
    plugin: Neo4jPlugin,
    params: Neo4jPluginParams,
    *,
    settings: Neo4jSettings | None = None,
    graph_factory: GraphFactory = Neo4jClient,
) -> ActionRef:
    """Configure and register a retriever for ``params.index_id``."""
    graph_config = resolve_graph_config(params.client_params, settings=settings)
    return plugin.register_retriever(
        Neo4jRetriever(
            index_id=params.index_id,
            embedder=params.embedder,
            graph_config=graph_config,
            embedder_options=params.embedder_options,
            graph_factory=graph_factory,
        )
    )


def configure_neo4j_indexer(
    plugin: Neo4jPlugin,
    params: Neo4jPluginParams,
    *,
    settings: Neo4jSettings | None = None,
    graph_factory: GraphFactory = Neo4jClient,
) -> ActionRef:
    """Configure and register an indexer for ``params.index_id``."""
    graph_config = resolve_graph_config(params.client_params, settings=settings)
    return plugin.register_indexer(
        Neo4jIndexer(
            index_id=params.index_id,
            embedder=params.embedder,
            graph_config=graph_config,
            embedder_options=params.embedder_options,
            graph_factory=graph_factory,
            embed_concurrency=params.embed_concurrency,
        )
    )


def neo4j(
    params: list[Neo4jPluginParams],
    *,
    settings: Neo4jSettings | None = None,
    graph_factory: GraphFactory = Neo4jClient,
) -> Neo4jPlugin:
    """Build a plugin with one retriever and one indexer per entry in ``params``.

    Args:
        params: One entry per index id. Entries without ``client_params`` fall
            back to the NEO4J_URI, NEO4J_USERNAME, NEO4J_PASSWORD and
            NEO4J_DATABASE environment variables.
        settings: Explicit settings used instead of the process environment.
        graph_factory: Builds the database client for each invocation.

    Raises:
        ConfigurationError: If connection details cannot be resolved.
    """
    plugin = Neo4jPlugin()
    for entry in params:
        configure_neo4j_retriever(
            plugin, entry, settings=settings, graph_factory=graph_factory
        )
    for entry in params:
        configure_neo4j_indexer(
            plugin, entry, settings=settings, graph_factory=graph_factory
        )
    return plugin
