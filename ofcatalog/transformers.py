"""Conversions of extracted values into numbers and of TOML into JSON."""

import datetime
import json
import tomllib
from typing import Any

__all__ = ["bool_to_float", "string_to_float", "interface_to_float", "toml_to_json"]


def bool_to_float(value: bool) -> float:
    """Map True to 1.0 and False to 0.0."""
    return float(bool(value))


def string_to_float(value: str) -> float:
    """Parse a string, ignoring surrounding whitespace, as a float."""
    if value == "":
        raise ValueError("input string is empty")
    text = value.strip()
    try:
        if "_" in text:
            raise ValueError(text)
        return float(text)
    except ValueError:
        raise ValueError(f'failed to parse string to float64: invalid syntax "{text}"') from None


def interface_to_float(value: Any) -> float:
    """Convert a task result (None, bool, number, str or bytes) to a float."""
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return bool_to_float(value)
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        return string_to_float(value)
    if isinstance(value, (bytes, bytearray)):
        return string_to_float(bytes(value).decode())
    raise TypeError(f"unexpected result type: {type(value).__name__}")


def _json_default(obj: Any) -> str:
    if isinstance(obj, (datetime.datetime, datetime.date, datetime.time)):
        return obj.isoformat()
    raise TypeError(f"cannot encode {type(obj).__name__}")


def toml_to_json(toml_data: str) -> bytes:
    """Parse a TOML document and return it as compact JSON bytes with sorted keys."""
    data = tomllib.loads(toml_data)
    return json.dumps(data, separators=(",", ":"), sort_keys=True, default=_json_default).encode()