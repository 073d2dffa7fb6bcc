import logging
from typing import Any

from openai import AsyncOpenAI

from neo4j_vector_store.embedding.base import Embedder

logger = logging.getLogger(__name__)


class OpenAIEmbedder(Embedder):
    """OpenAI implementation of Embedder.

    The embedder is shared by the indexer and retriever of an index id and
    is never closed by them; whoever creates it calls ``aclose()`` when done.
    """

    DEFAULT_EMBEDDING_MODEL = "text-embedding-3-small"

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        dimensions: int | None = None,
    ) -> None:
        """Initialize OpenAI embedder.

        Args:
            api_key: OpenAI API key. Falls back to OPENAI_API_KEY when omitted.
            model: Embedding model (default: text-embedding-3-small).
            dimensions: Optional output dimensionality for models that support it.
        """
        self._client = AsyncOpenAI(api_key=api_key)
        self._model = model or self.DEFAULT_EMBEDDING_MODEL
        self._dimensions = dimensions

    async def embed(
        self,
        content: str | list[str],
        options: dict[str, Any] | None = None,
    ) -> list[list[float]]:
        """Generate embedding vectors for content.

        Args:
            content: Text or list of texts to embed.
            options: May override ``model`` and ``dimensions`` for this call.

        Returns:
            One embedding per input text, ordered as the input.

        Raises:
            openai.OpenAIError: Propagated unchanged from the SDK.
        """
        options = options or {}
        kwargs: dict[str, Any] = {
            "model": options.get("model", self._model),
            "input": content,
        }
        dimensions = options.get("dimensions", self._dimensions)
        if dimensions is not None:
            kwargs["dimensions"] = dimensions

        response = await self._client.embeddings.create(**kwargs)
        logger.debug(
            "Embedded %d input(s) with %s", len(response.data), kwargs["model"]
        )
        ordered = sorted(response.data, key=lambda item: item.index)
        return [item.embedding for item in ordered]

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.close()
