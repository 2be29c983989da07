"""Small helpers for lists."""

from collections.abc import Iterable

__all__ = ["contains"]


def contains(items: Iterable[str], element: str) -> bool:
    """Return True when ``element`` is one of ``items``."""
    return element in items