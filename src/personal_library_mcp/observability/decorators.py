"""Decorators for tracing MCP components."""

import functools
from collections.abc import Callable
from datetime import datetime
from typing import Any

import logfire


def trace_tool(tool_name: str):
    """Wrap an async tool handler in a logfire span."""

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            with logfire.span(
                f"tool.execution.{tool_name}",
                tool_name=tool_name,
                tool_category=_categorize_tool(tool_name),
            ) as span:
                start_time = datetime.now()
                arguments = next((a for a in args if isinstance(a, dict)), kwargs.get("arguments"))
                _add_attributes(span, "input", arguments if isinstance(arguments, dict) else kwargs)

                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    span.set_attribute("tool.success", False)
                    span.set_attribute("tool.error", str(e))
                    raise

                # Handlers report failures as isError responses rather than raising
                span.set_attribute("tool.success", not _is_error(result))
                span.set_attribute(
                    "tool.duration_ms", (datetime.now() - start_time).total_seconds() * 1000
                )
                return result

        return wrapper

    return decorator


def trace_resource(resource_type: str):
    """Lightweight decorator for resource reads."""

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            with logfire.span(
                f"resource.read.{resource_type}",
                resource_type=resource_type,
            ) as span:
                result = await func(*args, **kwargs)
                if isinstance(result, dict) and "books" in result:
                    span.set_attribute("result.item_count", len(result["books"]))
                return result

        return wrapper

    return decorator


def _categorize_tool(tool_name: str) -> str:
    if tool_name.startswith("admin"):
        return "session"
    if "import" in tool_name or "export" in tool_name:
        return "transfer"
    if "search" in tool_name:
        return "discovery"
    if tool_name in {"suggest_book_details", "get_author_bio", "generate_book_cover"}:
        return "ai"
    return "catalog"


def _add_attributes(span, prefix: str, data: dict):
    """Add scalar inputs to the span, leaving out the admin secret."""
    for key, value in data.items():
        if key == "secret":
            continue
        if isinstance(value, str | int | float | bool):
            span.set_attribute(f"{prefix}.{key}", value)


def _is_error(result: Any) -> bool:
    return isinstance(result, dict) and bool(result.get("isError"))
