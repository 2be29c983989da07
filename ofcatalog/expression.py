"""Evaluation of simple numeric comparison expressions such as ``"5 >= 3"``."""

import math
import operator
import re

__all__ = ["ExpressionError", "evaluate"]

# Checked in this order: the two-character operators that start with
# ``>`` or ``<`` must win over their one-character prefixes.
_OPERATORS = (">=", "<=", ">", "<", "==", "!=")

_COMPARISONS = {
    ">": operator.gt,
    "<": operator.lt,
    ">=": operator.ge,
    "<=": operator.le,
    "==": operator.eq,
    "!=": operator.ne,
}

_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)", re.IGNORECASE)


class ExpressionError(ValueError):
    """Raised when an expression cannot be parsed or evaluated."""


def _find_operator(expr: str) -> str:
    for op in _OPERATORS:
        if op in expr:
            return op
    raise ExpressionError("no valid operator found in expression")


def _parse_operand(text: str, side: str) -> float:
    if not _NUMBER.fullmatch(text):
        raise ExpressionError(f"invalid {side} operand: {text!r}")
    value = float(text)
    if math.isnan(value) and text.lower().lstrip("+-") != "nan":
        raise ExpressionError(f"invalid {side} operand: {text!r}")
    return value


def _split_operands(expr: str, op: str) -> tuple[float, float]:
    parts = expr.split(op)
    if len(parts) != 2:
        raise ExpressionError("invalid expression format")
    left, right = (part.strip() for part in parts)
    return _parse_operand(left, "left"), _parse_operand(right, "right")


def evaluate(expr: str) -> bool:
    """Evaluate ``<number> <operator> <number>`` and return the comparison result."""
    expr = expr.strip()
    op = _find_operator(expr)
    left, right = _split_operands(expr, op)
    return _COMPARISONS[op](left, right)