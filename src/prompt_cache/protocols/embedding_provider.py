"""Interface for turning prompts into vectors for semantic matching.

Implementations in this package: Ollama over HTTP (default) and an
in-process sentence-transformers model. Any hosted embedding API fits
as long as it is async.

Failures are expected: the cache service treats any exception from
`encode` as "embedding unavailable" and falls back to fingerprint matching.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Async embedding generator, matched structurally.

    Example:
        ```python
        embedder: EmbeddingProvider = OllamaEmbeddingProvider.create()
        vector = await embedder.encode("Explain the CQRS pattern")
        ```
    """

    @property
    def model_name(self) -> str:
        """Identifier reported in stats, e.g. "nomic-embed-text"."""
        ...

    async def encode(self, text: str) -> list[float]:
        """Vector for one prompt. Vectors from one provider share a dimension.

        Raises:
            Exception: Any failure; callers degrade to exact matching
        """
        ...

    async def is_available(self) -> bool:
        """Whether `encode` is expected to succeed right now."""
        ...
