import json
import os
from dataclasses import dataclass, field
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

DEFAULT_COST_TABLE: dict[str, float] = {
    "openai": 0.002,  # GPT-4 approximate
    "anthropic": 0.003,  # Claude approximate
    "gemini": 0.001,  # Gemini approximate
}

EVICTION_STRATEGIES = ("lru", "lfu", "ttl", "intelligent")
EMBEDDING_BACKENDS = ("ollama", "local", "none")

# Model ids differ per backend: Ollama tags vs sentence-transformers names
DEFAULT_EMBEDDING_MODELS = {
    "ollama": "nomic-embed-text",
    "local": "all-MiniLM-L6-v2",
    "none": "",
}


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


def _env_cost_table() -> dict[str, float]:
    raw = os.getenv("CACHE_COST_TABLE")
    if not raw:
        return dict(DEFAULT_COST_TABLE)
    table = json.loads(raw)
    if not isinstance(table, dict):
        raise ValueError("CACHE_COST_TABLE must be a JSON object of provider -> cost per 1k tokens")
    return {str(provider): float(cost) for provider, cost in table.items()}


def _env_embedding_model() -> str:
    explicit = os.getenv("EMBEDDING_MODEL")
    if explicit:
        return explicit
    backend = os.getenv("EMBEDDING_BACKEND", "ollama").lower()
    return DEFAULT_EMBEDDING_MODELS.get(backend, DEFAULT_EMBEDDING_MODELS["ollama"])


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Cache
    cache_capacity: int = field(default_factory=lambda: int(os.getenv("CACHE_MAX_SIZE", "1000")))
    cache_ttl: int = field(default_factory=lambda: int(os.getenv("CACHE_TTL", "7200")))  # 2 hours, 0 = never
    similarity_threshold: float = field(
        default_factory=lambda: float(os.getenv("SEMANTIC_THRESHOLD", "0.85"))
    )
    semantic_matching: bool = field(default_factory=lambda: _env_bool("SEMANTIC_MATCHING", "true"))
    cache_hit_target: float = field(default_factory=lambda: float(os.getenv("CACHE_HIT_TARGET", "0.80")))
    eviction_strategy: str = field(
        default_factory=lambda: os.getenv("CACHE_EVICTION_STRATEGY", "intelligent").lower()
    )

    # Pricing (USD per 1000 tokens)
    cost_table: dict[str, float] = field(default_factory=_env_cost_table)
    default_cost_per_1k: float = field(
        default_factory=lambda: float(os.getenv("CACHE_DEFAULT_COST_PER_1K", "0.002"))
    )

    # Embedding
    embedding_backend: str = field(default_factory=lambda: os.getenv("EMBEDDING_BACKEND", "ollama").lower())
    embedding_model: str = field(default_factory=_env_embedding_model)
    embedding_cache_size: int = field(default_factory=lambda: int(os.getenv("EMBEDDING_CACHE_SIZE", "2000")))

    # Ollama
    ollama_base_url: str = field(
        default_factory=lambda: os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")
    )

    # API
    api_host: str = field(default_factory=lambda: os.getenv("API_HOST", "0.0.0.0"))
    api_port: int = field(default_factory=lambda: int(os.getenv("API_PORT", "8000")))
    api_reload: bool = field(default_factory=lambda: _env_bool("API_RELOAD", "false"))

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.cache_capacity < 1:
            raise ValueError("CACHE_MAX_SIZE must be at least 1")

        if self.cache_ttl < 0:
            raise ValueError("CACHE_TTL must be >= 0 (0 disables expiry)")

        if not 0 <= self.similarity_threshold <= 1:
            raise ValueError("SEMANTIC_THRESHOLD must be between 0 and 1 for cosine similarity")

        if not 0 <= self.cache_hit_target <= 1:
            raise ValueError("CACHE_HIT_TARGET must be between 0 and 1")

        if self.eviction_strategy not in EVICTION_STRATEGIES:
            raise ValueError(
                f"CACHE_EVICTION_STRATEGY must be one of {list(EVICTION_STRATEGIES)}, "
                f"got {self.eviction_strategy!r}"
            )

        if self.embedding_backend not in EMBEDDING_BACKENDS:
            raise ValueError(
                f"EMBEDDING_BACKEND must be one of {list(EMBEDDING_BACKENDS)}, "
                f"got {self.embedding_backend!r}"
            )

        if self.default_cost_per_1k < 0 or any(cost < 0 for cost in self.cost_table.values()):
            raise ValueError("Costs per 1k tokens must be non-negative")

        if self.embedding_cache_size < 0:
            raise ValueError("EMBEDDING_CACHE_SIZE must be >= 0")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
