"""Deterministic lookup keys for (prompt, provider, model) requests."""

import hashlib
import re

_WHITESPACE = re.compile(r"\s+")


def normalize_prompt(prompt: str) -> str:
    """Collapse insignificant whitespace so reformatted prompts share a key.

    Leading/trailing whitespace is dropped and every run of whitespace
    (spaces, tabs, newlines) becomes a single space. Case is preserved.
    """
    return _WHITESPACE.sub(" ", prompt).strip()


def fingerprint(prompt: str, provider: str, model: str) -> str:
    """Build the cache key for a request.

    Args:
        prompt: Raw prompt text (normalized here)
        provider: Upstream provider identifier, e.g. "openai"
        model: Model identifier, e.g. "gpt-4"

    Returns:
        Key of the form ``{provider}_{model}_{sha256 hex}``
    """
    normalized = normalize_prompt(prompt)
    digest = hashlib.sha256(f"{provider}:{model}:{normalized}".encode("utf-8")).hexdigest()
    return f"{provider}_{model}_{digest}"
