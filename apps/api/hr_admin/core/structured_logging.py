"""Structured logging helpers (PII-safe: ids only, never names or emails)."""

from typing import Any


def build_log_context(
    *,
    user_id: int | None = None,
    company_id: int | None = None,
    entity: str | None = None,
    entity_id: int | None = None,
    action: str | None = None,
) -> dict[str, Any]:
    """Return a PII-safe log context dict."""
    context: dict[str, Any] = {}
    if user_id:
        context["user_id"] = user_id
    if company_id:
        context["company_id"] = company_id
    if entity:
        context["entity"] = entity
    if entity_id:
        context["entity_id"] = entity_id
    if action:
        context["action"] = action
    return context


def format_log_context(context: dict[str, Any]) -> str:
    """Render a context dict as ``key=value`` pairs for %s-style log lines."""
    return " ".join(f"{key}={value}" for key, value in context.items())
