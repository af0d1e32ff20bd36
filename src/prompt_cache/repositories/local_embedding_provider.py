"""In-process embeddings with sentence-transformers (EMBEDDING_BACKEND=local).

Useful when no Ollama server is around. The model loads on first use; the
forward pass is CPU/GPU bound, so it runs in a worker thread and the event
loop keeps serving cache hits meanwhile.
"""

import asyncio
import logging
import threading
import time

import numpy as np
from sentence_transformers import SentenceTransformer

from prompt_cache.config import get_settings

logger = logging.getLogger(__name__)


class LocalEmbeddingProvider:
    """EmbeddingProvider running a sentence-transformers model locally.

    Vectors are L2-normalized by the model, which matches the cosine
    similarity used by the semantic index.
    """

    def __init__(self, model_name: str | None = None) -> None:
        self._model_name = model_name or get_settings().embedding_model
        self._model: SentenceTransformer | None = None
        # Concurrent first lookups must not load the model twice
        self._load_lock = threading.Lock()

    @classmethod
    def create(cls, model_name: str | None = None) -> "LocalEmbeddingProvider":
        return cls(model_name=model_name)

    @property
    def model_name(self) -> str:
        return self._model_name

    def _load(self) -> SentenceTransformer:
        with self._load_lock:
            if self._model is None:
                started = time.perf_counter()
                self._model = SentenceTransformer(self._model_name)
                logger.info("Loaded %s in %.2fs", self._model_name, time.perf_counter() - started)
            return self._model

    def _embed(self, text: str) -> list[float]:
        output = np.asarray(
            self._load().encode(text, show_progress_bar=False, normalize_embeddings=True),
            dtype=np.float32,
        )
        return output.reshape(-1, output.shape[-1])[0].tolist()

    async def encode(self, text: str) -> list[float]:
        return await asyncio.to_thread(self._embed, text)

    async def is_available(self) -> bool:
        """True once the model can be loaded."""
        try:
            await asyncio.to_thread(self._load)
        except Exception as e:
            logger.debug("Local embedding model %s unavailable: %s", self._model_name, e)
            return False
        return True
