"""Request DTOs for API endpoints."""

from typing import Any

from pydantic import BaseModel, Field


class LookupCacheRequest(BaseModel):
    """Request DTO for looking up a cached response.

    The handler will convert this to internal calls to the service layer.
    """

    prompt: str = Field(..., description="The prompt to look up", min_length=1)
    provider: str = Field(..., description="Upstream provider, e.g. 'openai'", min_length=1)
    model: str = Field(..., description="Model identifier, e.g. 'gpt-4'", min_length=1)
    use_semantic: bool = Field(True, description="Allow near-duplicate (semantic) matches")


class StoreCacheRequest(BaseModel):
    """Request DTO for storing a provider response."""

    prompt: str = Field(..., description="The original prompt", min_length=1)
    response: Any = Field(..., description="The provider response payload to cache")
    provider: str = Field(..., description="Upstream provider that produced the response", min_length=1)
    model: str = Field(..., description="Model that produced the response", min_length=1)
    token_count: int | None = Field(
        None,
        description="Provider token count (estimated from the prompt if omitted)",
        ge=0,
    )
    response_time_ms: float = Field(0.0, description="Latency of the uncached call", ge=0.0)
    cache_hint: bool = Field(False, description="Content is especially stable/reusable")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Optional metadata")


class ProjectContextRequest(BaseModel):
    """Request DTO describing a project for contextual warming."""

    tech_stack: list[str] = Field(default_factory=list, description="Technologies, e.g. ['React']")
    project_type: str = Field("web_application", description="e.g. 'microservices', 'ecommerce'")
