from abc import ABC, abstractmethod
from typing import Any


class Embedder(ABC):
    """Abstract interface for embedding providers."""

    @abstractmethod
    async def embed(
        self,
        content: str | list[str],
        options: dict[str, Any] | None = None,
    ) -> list[list[float]]:
        """Generate embeddings for content.

        Args:
            content: A single text or a list of texts.
            options: Provider-specific options, e.g. model or dimensions.

        Returns:
            One embedding vector per input text, in input order.
        """
        ...
