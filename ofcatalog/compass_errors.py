"""Classification of error messages returned by Compass."""

import re
from collections.abc import Iterable
from dataclasses import dataclass

__all__ = ["CompassError", "has_already_exists_error", "has_not_found_error"]

_ALREADY_EXISTS = re.compile(r".*already exists")
_NOT_FOUND = re.compile(r".*not found")


@dataclass(frozen=True)
class CompassError:
    """One error entry of a Compass response."""

    message: str


def has_already_exists_error(errors: Iterable[CompassError]) -> bool:
    """True when any error says that the resource already exists."""
    return any(_ALREADY_EXISTS.match(err.message) for err in errors)


def has_not_found_error(errors: Iterable[CompassError]) -> bool:
    """True when any error says that the resource was not found."""
    return any(_NOT_FOUND.search(err.message) for err in errors)