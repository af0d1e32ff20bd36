"""Embeddings from a local Ollama server.

Default embedding backend for semantic cache hits (EMBEDDING_BACKEND=ollama).
Setup: `ollama serve`, then `ollama pull nomic-embed-text` (768 dims).
Other usable models include mxbai-embed-large (1024 dims) and all-minilm
(384 dims); switching models changes the vector dimension, so clear the
cache afterwards.
"""

import logging

import httpx

from prompt_cache.config import get_settings

logger = logging.getLogger(__name__)


class OllamaEmbeddingProvider:
    """EmbeddingProvider backed by Ollama's `/api/embed` endpoint.

    The HTTP client is created on first use and shared by all calls; pass
    `client` to reuse an existing one or to plug in a test transport.

    Example:
        ```python
        embedder = OllamaEmbeddingProvider.create(model_name="nomic-embed-text")
        vector = await embedder.encode("Explain the CQRS pattern")
        await embedder.close()
        ```
    """

    def __init__(
        self,
        model_name: str | None = None,
        base_url: str | None = None,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Args:
            model_name: Ollama model tag. Defaults to EMBEDDING_MODEL.
            base_url: Server URL. Defaults to OLLAMA_BASE_URL.
            timeout: Per-request timeout in seconds.
            client: Preconfigured async client.
        """
        settings = get_settings()
        self._model_name = model_name or settings.embedding_model
        self._endpoint = f"{(base_url or settings.ollama_base_url).rstrip('/')}/api/embed"
        self._timeout = timeout
        self._client = client

    @classmethod
    def create(cls, model_name: str | None = None, base_url: str | None = None) -> "OllamaEmbeddingProvider":
        """Factory method using settings for anything not given."""
        return cls(model_name=model_name, base_url=base_url)

    @property
    def model_name(self) -> str:
        return self._model_name

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                limits=httpx.Limits(max_connections=50, max_keepalive_connections=10),
            )
        return self._client

    def _describe(self, error: httpx.HTTPError) -> str:
        hint = ""
        if isinstance(error, httpx.ConnectError):
            hint = " (is the server up? run `ollama serve`)"
        elif isinstance(error, httpx.HTTPStatusError) and error.response.status_code == 404:
            hint = f" (run `ollama pull {self._model_name}`)"
        return f"Ollama embedding request to {self._endpoint} failed: {error}{hint}"

    async def encode(self, text: str) -> list[float]:
        """Embed one prompt.

        Raises:
            RuntimeError: Transport failure or non-2xx answer
            ValueError: Answer without a usable vector
        """
        try:
            reply = await self.client.post(self._endpoint, json={"model": self._model_name, "input": text})
            reply.raise_for_status()
            body = reply.json()
        except httpx.HTTPError as e:
            raise RuntimeError(self._describe(e)) from e

        # Current servers: {"embeddings": [[...]]}; legacy: {"embedding": [...]}
        vectors = body.get("embeddings")
        vector = vectors[0] if vectors else body.get("embedding")
        if not vector:
            raise ValueError(f"Ollama answer has no embedding: {body}")
        return [float(x) for x in vector]

    async def is_available(self) -> bool:
        """True when the server answers an embedding request for the model."""
        try:
            await self.encode("ping")
        except (RuntimeError, ValueError) as e:
            logger.debug("Ollama embeddings unavailable: %s", e)
            return False
        return True

    async def close(self) -> None:
        """Release the HTTP client; called on application shutdown."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
