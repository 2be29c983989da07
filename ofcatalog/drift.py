"""Detection of drift between recorded state and desired configuration."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Generic, TypeVar

__all__ = ["DriftResult", "detect"]

T = TypeVar("T")


@dataclass
class DriftResult(Generic[T]):
    """Items split by what must happen to them."""

    created: dict[str, T] = field(default_factory=dict)
    updated: dict[str, T] = field(default_factory=dict)
    deleted: dict[str, T] = field(default_factory=dict)
    unchanged: dict[str, T] = field(default_factory=dict)


def detect(
    state_map: Mapping[str, T],
    config_map: Mapping[str, T],
    from_state_to_config: Callable[[T, T], None],
    is_equal: Callable[[T, T], bool],
) -> DriftResult[T]:
    """Compare state with configuration, key by key.

    ``from_state_to_config`` is called on each pair present in both before
    comparison, so state-only fields can be carried over.
    """
    result: DriftResult[T] = DriftResult()
    for key, state_item in state_map.items():
        if key not in config_map:
            result.deleted[key] = state_item
            continue
        config_item = config_map[key]
        from_state_to_config(state_item, config_item)
        if is_equal(state_item, config_item):
            result.unchanged[key] = config_item
        else:
            result.updated[key] = config_item
    for key, config_item in config_map.items():
        if key not in state_map:
            result.created[key] = config_item
    return result