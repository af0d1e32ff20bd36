"""Warming candidate entities."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class WarmingCandidate:
    """Anticipated high-value prompt from the static catalog."""

    content: str
    priority: int
    estimated_value: float
    category: str
    cache_hint: bool = True

    @property
    def weight(self) -> float:
        return self.priority * self.estimated_value


@dataclass(frozen=True)
class ContextualWarmingItem:
    """Prompt tailored to a project context, with a suggested provider/model."""

    content: str
    priority: int
    provider: str
    model: str


@dataclass(frozen=True)
class ProjectContext:
    """Description of a caller's project used to tailor warming content.

    Attributes:
        tech_stack: Technologies in use, e.g. ["React", "Node.js"]
        project_type: Category such as "web_application", "microservices", "ecommerce"
    """

    tech_stack: tuple[str, ...] = ()
    project_type: str = "web_application"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "ProjectContext":
        data = data or {}
        tech_stack = data.get("tech_stack") or ()
        if isinstance(tech_stack, str):
            tech_stack = (tech_stack,)
        return cls(
            tech_stack=tuple(tech_stack),
            project_type=data.get("project_type") or "web_application",
        )
