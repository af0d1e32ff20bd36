"""Cache warming suggestions.

Warming is advisory: this service only proposes prompts worth
pre-fetching. The caller decides whether to call a provider for them and
hands the results to `CacheService.warm_cache`.
"""

from collections.abc import Mapping
from typing import Any

from prompt_cache.entities import ContextualWarmingItem, ProjectContext, WarmingCandidate

# Architectural decisions and system patterns
SYSTEM_PATTERNS = (
    WarmingCandidate(
        content="Implement microservice architecture with Docker containers and Kubernetes orchestration",
        priority=10,
        estimated_value=0.95,
        category="architecture",
    ),
    WarmingCandidate(
        content="Design RESTful API following OpenAPI 3.0 specification with proper error handling",
        priority=9,
        estimated_value=0.90,
        category="api_design",
    ),
    WarmingCandidate(
        content="Implement React TypeScript component with proper props validation and error boundaries",
        priority=8,
        estimated_value=0.85,
        category="frontend",
    ),
)

# Recurring workflow phases
WORKFLOW_PATTERNS = (
    WarmingCandidate(
        content=(
            "Workflow Phase 1: Problem exploration and solution generation. Analyze requirements, "
            "identify constraints, generate multiple solution approaches."
        ),
        priority=9,
        estimated_value=0.92,
        category="workflow_phase1",
    ),
    WarmingCandidate(
        content=(
            "Workflow Phase 2: Detailed analysis and optimization. Evaluate solutions against criteria, "
            "perform trade-off analysis, select optimal approach."
        ),
        priority=8,
        estimated_value=0.88,
        category="workflow_phase2",
    ),
    WarmingCandidate(
        content=(
            "Workflow Phase 3: Implementation with testing and documentation. Code implementation, "
            "unit testing, integration testing, documentation."
        ),
        priority=7,
        estimated_value=0.85,
        category="workflow_phase3",
    ),
)

# Code review and optimization
CODE_PATTERNS = (
    WarmingCandidate(
        content=(
            "Perform comprehensive code review focusing on performance, security, maintainability, "
            "and adherence to coding standards"
        ),
        priority=7,
        estimated_value=0.80,
        category="code_review",
    ),
    WarmingCandidate(
        content=(
            "Optimize database queries for performance, implement proper indexing, and ensure "
            "efficient data access patterns"
        ),
        priority=6,
        estimated_value=0.75,
        category="database_optimization",
    ),
)

# tech (lowercase) -> prompt tailored to it
TECH_STACK_CONTENT: dict[str, ContextualWarmingItem] = {
    "react": ContextualWarmingItem(
        content=(
            "Create a React TypeScript component with the following requirements: proper props interface, "
            "error boundary handling, responsive design, accessibility compliance, and performance "
            "optimization using React.memo and useMemo hooks."
        ),
        priority=8,
        provider="openai",
        model="gpt-4",
    ),
    "node.js": ContextualWarmingItem(
        content=(
            "Design a Node.js Express API server with proper middleware, error handling, authentication, "
            "rate limiting, input validation, and MongoDB integration following MVC architecture patterns."
        ),
        priority=8,
        provider="anthropic",
        model="claude-3-sonnet",
    ),
    "python": ContextualWarmingItem(
        content=(
            "Design a Python FastAPI service with pydantic request validation, dependency injection, "
            "structured error responses, async database access, and pytest coverage."
        ),
        priority=7,
        provider="anthropic",
        model="claude-3-sonnet",
    ),
}

PROJECT_TYPE_CONTENT: dict[str, ContextualWarmingItem] = {
    "microservices": ContextualWarmingItem(
        content=(
            "Design microservice architecture with service discovery, API gateway, distributed tracing, "
            "circuit breakers, and proper inter-service communication patterns."
        ),
        priority=9,
        provider="gemini",
        model="gemini-pro",
    ),
    "ecommerce": ContextualWarmingItem(
        content=(
            "Implement secure e-commerce platform with payment processing, inventory management, "
            "user authentication, order tracking, and recommendation engine."
        ),
        priority=7,
        provider="openai",
        model="gpt-4",
    ),
}


class WarmingService:
    """Proposes high-value prompts to pre-populate the cache with.

    Example:
        ```python
        warming = WarmingService()
        for candidate in warming.identify_warming_candidates():
            print(candidate.priority, candidate.content)

        items = warming.generate_contextual_warming_content(
            {"tech_stack": ["React"], "project_type": "microservices"}
        )
        ```
    """

    def identify_warming_candidates(self) -> list[WarmingCandidate]:
        """Static catalog ordered by priority x estimated value, highest first."""
        candidates = [*SYSTEM_PATTERNS, *WORKFLOW_PATTERNS, *CODE_PATTERNS]
        return sorted(candidates, key=lambda c: c.weight, reverse=True)

    def generate_contextual_warming_content(
        self, project_context: ProjectContext | Mapping[str, Any] | None
    ) -> list[ContextualWarmingItem]:
        """Prompts tailored to the caller's stack and project type.

        Args:
            project_context: ProjectContext or a mapping with `tech_stack`
                and `project_type` keys; unknown technologies are ignored

        Returns:
            Items ordered by priority, highest first
        """
        if not isinstance(project_context, ProjectContext):
            project_context = ProjectContext.from_dict(project_context)

        items: list[ContextualWarmingItem] = []
        seen: set[str] = set()
        for tech in project_context.tech_stack:
            item = TECH_STACK_CONTENT.get(tech.strip().lower())
            if item is not None and item.content not in seen:
                items.append(item)
                seen.add(item.content)

        project_item = PROJECT_TYPE_CONTENT.get(project_context.project_type.strip().lower())
        if project_item is not None:
            items.append(project_item)

        return sorted(items, key=lambda item: item.priority, reverse=True)
