from neo4j_vector_store.embedding.base import Embedder
from neo4j_vector_store.embedding.openai_embedder import OpenAIEmbedder

__all__ = ["Embedder", "OpenAIEmbedder"]
