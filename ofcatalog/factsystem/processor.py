"""Concurrent execution of a graph of fact tasks."""

import threading
from collections.abc import Iterable, Sequence
from enum import Enum
from typing import Any, Protocol

from ofcatalog.factsystem.task import Task
from ofcatalog.transformers import interface_to_float

__all__ = ["Processor"]

_EXTRACT = "extract"
_VALIDATE = "validate"
_AGGREGATE = "aggregate"


class _Aggregator(Protocol):
    def combine(self, task: Task, deps: Sequence[Task]) -> None: ...


class _Validator(Protocol):
    def check(self, task: Task, deps: Sequence[Task]) -> None: ...


class _Extractor(Protocol):
    def extract(self, task: Task, deps: Sequence[Task]) -> None: ...


def _value(item: Any) -> Any:
    return item.value if isinstance(item, Enum) else item


class Processor:
    """Runs each task once its dependencies are done and returns the final result."""

    def __init__(
        self, aggregator: _Aggregator, validator: _Validator, extractor: _Extractor
    ) -> None:
        self.aggregator = aggregator
        self.validator = validator
        self.extractor = extractor
        self._lock = threading.Lock()

    def process(self, tasks: Iterable[Task]) -> float:
        """Run all tasks concurrently; return the last finished task's result as a float.

        Task failures are reported and do not stop the other tasks.
        """
        tasks = list(tasks)
        by_id = {task.id: task for task in tasks}
        done = {id(task): threading.Event() for task in tasks}
        last_result: list[Any] = [None]

        def run(task: Task, deps: list[Task]) -> None:
            try:
                for dep in deps:
                    done[id(dep)].wait()
                self._execute(task, deps)
                with self._lock:
                    last_result[0] = task.result
            finally:
                done[id(task)].set()

        threads = []
        for task in tasks:
            deps = [by_id[name] for name in task.depends_on or () if name in by_id]
            thread = threading.Thread(target=run, args=(task, deps), daemon=True)
            threads.append(thread)
            thread.start()
        for thread in threads:
            thread.join()

        with self._lock:
            return interface_to_float(last_result[0])

    def _execute(self, task: Task, deps: list[Task]) -> None:
        kind = _value(task.type)
        try:
            if kind == _EXTRACT:
                extract_deps = [dep for dep in deps if _value(dep.type) == _EXTRACT]
                action = "extracting"
                self.extractor.extract(task, extract_deps)
            elif kind == _VALIDATE:
                action = "validating"
                self.validator.check(task, deps)
            elif kind == _AGGREGATE:
                action = "aggregating"
                self.aggregator.combine(task, deps)
            else:
                print(f"{task.id}: unknown task type: {kind}")
        except Exception as exc:
            print(f"{task.id}: error {action} data: {exc}")