"""Aggregation of the results of a task's dependencies."""

from collections.abc import Iterable
from typing import Any

from ofcatalog.factsystem.task import Task, TaskMethod, TaskType
from ofcatalog.factsystem.utils import to_list

__all__ = ["AggregationError", "Aggregator"]


class AggregationError(ValueError):
    """Raised when dependency results cannot be combined."""


class Aggregator:
    """Combines dependency results with count, sum, and or or."""

    def combine(self, task: Task, deps: Iterable[Task]) -> None:
        """Set ``task.result`` from its dependencies; other task types are left alone.

        Each dependency's result is combined first, then the partial results.
        """
        if task.type != TaskType.AGGREGATE:
            return
        partials = []
        for dep in deps:
            if dep.result is None:
                raise AggregationError("dependency result not provided")
            partials.append(self._combine_results(task, dep.result))
        task.result = self._combine_results(task, partials)

    def _combine_results(self, task: Task, results: Any) -> Any:
        try:
            method = TaskMethod(task.method)
        except ValueError:
            raise AggregationError("unknown method") from None
        if method is TaskMethod.COUNT:
            return self._count(results)
        if method is TaskMethod.SUM:
            return self._sum(results)
        if method is TaskMethod.AND:
            return self._logical(results, "and", all)
        return self._logical(results, "or", any)

    @staticmethod
    def _count(results: Any) -> float:
        if isinstance(results, (list, tuple)):
            return float(len(results))
        raise AggregationError(f"unsupported type for count: {type(results).__name__}")

    @staticmethod
    def _sum(results: Any) -> float:
        try:
            values = to_list(results, float)
        except TypeError as exc:
            raise AggregationError(f'combineResult error for method "sum": {exc}') from exc
        return sum(values, 0.0)

    @staticmethod
    def _logical(results: Any, name: str, reduce) -> bool:
        if isinstance(results, bool):
            return results
        try:
            values = to_list(results, bool)
        except TypeError as exc:
            raise AggregationError(f'combineResult error for method "{name}": {exc}') from exc
        return reduce(values)