"""Validation of dependency results against a task's rule."""

import math
import re
from collections.abc import Sequence
from enum import Enum
from typing import Any

from ofcatalog.expression import ExpressionError, evaluate
from ofcatalog.factsystem.task import Task

__all__ = ["ValidationError", "Validator"]

_VALIDATE = "validate"
_DEPS_MATCH = "deps_match"
_UNIQUE = "unique"
_REGEX_MATCH = "regex_match"
_FORMULA = "formula"


class ValidationError(ValueError):
    """Raised when a validate task cannot be evaluated."""


def _value(item: Any) -> Any:
    return item.value if isinstance(item, Enum) else item


def _format_value(value: Any) -> str:
    """Render a value the way results are rendered for rules and placeholders."""
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "+Inf" if value > 0 else "-Inf"
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return repr(value)
    if isinstance(value, (bytes, bytearray)):
        return "[" + " ".join(str(byte) for byte in value) + "]"
    if isinstance(value, (list, tuple)):
        return "[" + " ".join(_format_value(item) for item in value) + "]"
    if isinstance(value, dict):
        entries = sorted((_format_value(k), _format_value(v)) for k, v in value.items())
        return "map[" + " ".join(f"{k}:{v}" for k, v in entries) + "]"
    return str(value)


class Validator:
    """Checks dependency results with regular expressions, formulas and relations."""

    def check(self, task: Task, deps: Sequence[Task] | None) -> None:
        """Set ``task.result`` from its dependencies; other task types are left alone."""
        if _value(task.type) != _VALIDATE:
            return
        if not deps:
            raise ValidationError("too few dependencies provided for validate task")
        if len(deps) > 1:
            self._validate_deps_relations(task, deps)
            return

        result = deps[0].result
        if result is None:
            raise ValidationError("dependency result not provided")
        if isinstance(result, (list, tuple)):
            self._validate_list(task, list(result))
            return
        task.result = self._validate(task, result)

    def _validate_deps_relations(self, task: Task, deps: Sequence[Task]) -> None:
        if _value(task.rule) == _DEPS_MATCH:
            self._validate_dependencies_match(task, deps)

    def _validate_list(self, task: Task, values: list[Any]) -> None:
        if _value(task.rule) == _UNIQUE:
            task.result = self._is_unique(values)
        else:
            task.result = [self._validate(task, item) for item in values]

    @staticmethod
    def _is_unique(values: list[Any]) -> bool:
        seen: list[Any] = []
        for item in values:
            if item in seen:
                return False
            seen.append(item)
        return True

    def _validate(self, task: Task, value: Any) -> bool:
        text = _format_value(value)
        rule = _value(task.rule)
        if rule == _REGEX_MATCH:
            try:
                pattern = re.compile(task.pattern or "")
            except re.error as exc:
                raise ValidationError(f"invalid pattern: {exc}") from exc
            return pattern.search(text) is not None
        if rule == _FORMULA:
            try:
                return evaluate(f"{text} {task.pattern or ''}")
            except ExpressionError as exc:
                raise ValidationError(str(exc)) from exc
        raise ValidationError("unknown validation rule")

    @staticmethod
    def _validate_dependencies_match(task: Task, deps: Sequence[Task]) -> None:
        if len({type(dep.result) for dep in deps}) > 1:
            task.result = False
            return
        first = deps[0].result
        if isinstance(first, (list, tuple)):
            raise ValidationError("slice comparison not implemented")
        task.result = all(dep.result != first for dep in deps)