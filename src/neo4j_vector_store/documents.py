"""Documents and per-call option schemas shared by the indexer and retriever."""

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, Field

MAX_K = 1000


@dataclass(frozen=True)
class Document:
    """A unit of retrievable content."""

    text: str
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_text(
        cls, text: str, metadata: dict[str, Any] | None = None
    ) -> "Document":
        """Build a document from plain text and optional flat metadata."""
        return cls(text=text, metadata=dict(metadata or {}))


class RetrieverOptions(BaseModel):
    """Options accepted by a retriever call."""

    k: int = Field(gt=0, le=MAX_K)


class IndexerOptions(BaseModel):
    """Options accepted by an indexer call."""

    namespace: str | None = None


@dataclass
class RetrieverResponse:
    """Documents returned by a retriever, in store ranking order."""

    documents: list[Document]
