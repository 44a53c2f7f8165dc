"""Context variables for trip-scoped logging data.

Uses Python's contextvars so every asyncio task started for a trip
(route request, alert processor) carries the same trip identifier.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any
from uuid import uuid4

trip_id: ContextVar[str] = ContextVar("trip_id", default="")

_extra_context: ContextVar[dict[str, Any] | None] = ContextVar("extra_context", default=None)


def get_trip_id() -> str:
    """Get the current trip ID.

    Returns:
        The trip ID for the current context, or an empty string.
    """
    return trip_id.get()


def set_trip_id(value: str) -> None:
    """Set the trip ID for the current context.

    Args:
        value: The trip ID.
    """
    trip_id.set(value)


def generate_trip_id() -> str:
    """Generate and set a new trip ID.

    Returns:
        The generated trip ID.
    """
    new_id = str(uuid4())
    trip_id.set(new_id)
    return new_id


def get_extra_context() -> dict[str, Any]:
    """Get the current extra context.

    Returns:
        Dictionary of extra context fields.
    """
    context = _extra_context.get()
    if context is None:
        return {}
    return context.copy()


def set_extra_context(**kwargs: Any) -> None:
    """Set additional context fields to include in all log messages.

    Args:
        **kwargs: Key-value pairs to include in log messages.
    """
    current = _extra_context.get()
    current = {} if current is None else current.copy()
    current.update(kwargs)
    _extra_context.set(current)


def clear_context() -> None:
    """Clear all context (trip ID and extra context)."""
    trip_id.set("")
    _extra_context.set(None)


@contextmanager
def trip_context(value: str | None = None, **kwargs: Any) -> Iterator[str]:
    """Bind a trip ID and extra fields for the duration of a block.

    Args:
        value: Trip ID to bind. A new one is generated when omitted.
        **kwargs: Extra fields, e.g. ``device="wheelchair"``.

    Yields:
        The bound trip ID.
    """
    trip_token = trip_id.set(value or str(uuid4()))
    current = _extra_context.get()
    merged = {} if current is None else current.copy()
    merged.update(kwargs)
    extra_token = _extra_context.set(merged)
    try:
        yield trip_id.get()
    finally:
        _extra_context.reset(extra_token)
        trip_id.reset(trip_token)
