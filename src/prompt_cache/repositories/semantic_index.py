"""In-memory vector index for near-duplicate cache hits.

The index maps cache keys to unit-normalized embedding vectors and answers
"closest key above a cosine-similarity threshold" queries with a single
matrix-vector product. It holds back-references only: entries are owned
by the cache store and are removed through it.

Not thread-safe on its own; the cache store serializes access.
"""

from collections.abc import Callable, Sequence

import numpy as np

# Similarities closer than this are treated as equal for tie-breaking.
SIMILARITY_EPSILON = 1e-12


class SemanticIndex:
    """Cosine-similarity index over cache keys.

    Example:
        ```python
        index = SemanticIndex()
        index.index("key-1", [0.1, 0.9, 0.0])
        index.query([0.1, 0.8, 0.0], threshold=0.85)  # "key-1"
        ```
    """

    def __init__(self) -> None:
        self._vectors: dict[str, np.ndarray] = {}
        self._dimension: int | None = None
        # Stacked (keys, matrix) view, rebuilt lazily after changes
        self._matrix: tuple[list[str], np.ndarray] | None = None

    def __len__(self) -> int:
        return len(self._vectors)

    def __contains__(self, key: object) -> bool:
        return key in self._vectors

    @property
    def dimension(self) -> int | None:
        """Vector dimension fixed by the first indexed vector."""
        return self._dimension

    @staticmethod
    def _normalize(embedding: Sequence[float]) -> np.ndarray:
        vector = np.asarray(embedding, dtype=np.float32)
        if vector.ndim != 1 or vector.size == 0:
            raise ValueError("Embedding must be a non-empty 1-D vector")
        norm = float(np.linalg.norm(vector))
        if norm == 0.0:
            return vector
        return vector / norm

    def index(self, key: str, embedding: Sequence[float]) -> None:
        """Record the vector for `key`, replacing any previous one.

        Raises:
            ValueError: If the vector is empty or its dimension differs
                from the vectors already indexed
        """
        vector = self._normalize(embedding)
        if self._dimension is not None and vector.size != self._dimension:
            if not (len(self._vectors) == 1 and key in self._vectors):
                raise ValueError(
                    f"Embedding dimension {vector.size} does not match index dimension {self._dimension}"
                )
        self._dimension = vector.size
        self._vectors[key] = vector
        self._matrix = None

    def remove(self, key: str) -> bool:
        """Drop the vector association for `key`."""
        if self._vectors.pop(key, None) is None:
            return False
        self._matrix = None
        if not self._vectors:
            self._dimension = None
        return True

    def clear(self) -> None:
        self._vectors.clear()
        self._dimension = None
        self._matrix = None

    def _stacked(self) -> tuple[list[str], np.ndarray]:
        if self._matrix is None:
            keys = list(self._vectors)
            self._matrix = (keys, np.vstack([self._vectors[k] for k in keys]))
        return self._matrix

    def similarities(self, embedding: Sequence[float]) -> dict[str, float]:
        """Cosine similarity of `embedding` to every indexed vector."""
        if not self._vectors:
            return {}
        query = self._normalize(embedding)
        if query.size != self._dimension:
            return {}
        keys, matrix = self._stacked()
        return dict(zip(keys, (matrix @ query).tolist()))

    def query(
        self,
        embedding: Sequence[float],
        threshold: float,
        accept: Callable[[str], bool] | None = None,
        tiebreak: Callable[[str], tuple] | None = None,
    ) -> tuple[str, float] | None:
        """Find the closest indexed key whose similarity exceeds `threshold`.

        Args:
            embedding: Query vector
            threshold: Similarity a match must strictly exceed
            accept: Optional filter on candidate keys
            tiebreak: Sort key for equally similar candidates, larger wins

        Returns:
            (key, similarity) of the best match, or None
        """
        candidates = [
            (key, similarity)
            for key, similarity in self.similarities(embedding).items()
            if similarity > threshold and (accept is None or accept(key))
        ]
        if not candidates:
            return None

        best = max(similarity for _, similarity in candidates)
        tied = [item for item in candidates if best - item[1] <= SIMILARITY_EPSILON]
        if len(tied) > 1 and tiebreak is not None:
            tied.sort(key=lambda item: tiebreak(item[0]), reverse=True)
        return tied[0]
