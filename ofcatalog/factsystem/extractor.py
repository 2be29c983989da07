"""Extraction of data from GitHub, JSON APIs and Prometheus."""

import json
import math
import re
from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any, Protocol

from ofcatalog.factsystem.task import Task
from ofcatalog.factsystem.utils import inspect_extracted_data, replace_placeholder
from ofcatalog.factsystem.validator import _format_value
from ofcatalog.github import GitHubNotFoundError
from ofcatalog.transformers import toml_to_json

__all__ = ["ExtractionError", "Extractor"]

_GITHUB = "github"
_JSONAPI = "jsonapi"
_PROMETHEUS = "prometheus"
_JSON_PATH = "jsonpath"
_NOT_EMPTY = "notempty"
_SEARCH = "search"
_NOT_FOUND = re.compile(r"404 Not Found")


class ExtractionError(RuntimeError):
    """Raised when data cannot be extracted for a task."""


class _Config(Protocol):
    def get(self, env_var: str) -> str: ...


class _JSONService(Protocol):
    def get(self, url: str, headers: Mapping[str, str] | None) -> bytes: ...


class _GitHub(Protocol):
    def get_file_content(self, repo: str, path: str) -> str: ...

    def search(self, repo: str, query: str) -> list[str]: ...


class _Prometheus(Protocol):
    def instant_query(self, query: str) -> float: ...


def _value(item: Any) -> Any:
    return item.value if isinstance(item, Enum) else item


def _unquoted(text: str) -> str:
    """Strip one level of string quoting, or return the text unchanged."""
    if len(text) < 2 or text[0] != text[-1]:
        return text
    quote, inner = text[0], text[1:-1]
    if quote == "`":
        return text if "`" in inner or "\r" in inner else inner
    if quote == '"':
        try:
            decoded = json.loads(text)
        except ValueError:
            return text
        return decoded if isinstance(decoded, str) else text
    if quote == "'" and len(inner) == 1 and inner not in "'\\\n":
        return inner
    return text


def _file_extension(path: str) -> str:
    name = path.rsplit("/", 1)[-1]
    dot = name.rfind(".")
    return name[dot:] if dot >= 0 else ""


def _number_json(value: float) -> bytes:
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            raise ValueError(f"json: unsupported value: {_format_value(value)}")
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value)).encode()
    return json.dumps(value, allow_nan=False).encode()


class Extractor:
    """Fills an extract task's result from its configured source."""

    def __init__(
        self,
        config: _Config,
        json_service: _JSONService,
        github: _GitHub,
        prometheus_service: _Prometheus,
    ) -> None:
        self._config = config
        self._json_service = json_service
        self._github = github
        self._prometheus = prometheus_service

    def extract(self, task: Task, deps: Sequence[Task] | None) -> None:
        """Set ``task.result``, once per value of the single dependency if it has several."""
        deps = list(deps or ())
        if len(deps) > 1:
            raise ExtractionError("too many dependencies provided in extract context")
        if not deps:
            self._handle_single(task, "")
            return

        result = deps[0].result
        if result is None:
            raise ExtractionError("dependency result not provided")
        if isinstance(result, (list, tuple)):
            if not result:
                raise ExtractionError("dependency result not provided")
            self._handle_multiple(task, [_format_value(item) for item in result])
            return
        self._handle_single(task, _format_value(result))

    def _handle_single(self, task: Task, dependency_result: str) -> None:
        try:
            task.result = self._process(task, dependency_result)
        except Exception as exc:
            raise ExtractionError(
                f"single result handler failed to process request: {exc}"
            ) from exc

    def _handle_multiple(self, task: Task, dependency_results: list[str]) -> None:
        results: list[str] = []
        for value in dependency_results:
            try:
                result = self._process(task, value)
            except Exception as exc:
                raise ExtractionError(
                    f"multiple results handler failed to process request: {exc}"
                ) from exc
            if isinstance(result, (list, tuple)):
                results.extend(_format_value(item) for item in result)
            elif isinstance(result, str):
                results.append(result)
        task.result = results

    def _process(self, task: Task, dependency_result: str) -> Any:
        source = _value(task.source)
        rule = _value(task.rule)
        value = _unquoted(dependency_result)
        if source == _GITHUB:
            if rule == _SEARCH:
                try:
                    paths = self._github.search(task.repo, task.search_string)
                except Exception as exc:
                    raise ExtractionError(
                        f"failed to process github Search request for source for string "
                        f"{task.search_string} {task.source}: {exc}"
                    ) from exc
                return len(paths) != 0
            fetch = self._github_data
        elif source == _JSONAPI:
            fetch = self._json_api_data
        elif source == _PROMETHEUS:
            fetch = self._prometheus_data
        else:
            raise ExtractionError(f"no data extracted, unknown source {task.source}")

        try:
            data = fetch(task, value)
        except Exception as exc:
            raise ExtractionError(
                f"failed to process request for source {task.source}: {exc}"
            ) from exc

        if rule == _JSON_PATH:
            return inspect_extracted_data(task.json_path, data)
        if rule == _NOT_EMPTY:
            return data is not None
        return data

    def _github_data(self, task: Task, value: str) -> bytes | None:
        path = replace_placeholder(task.file_path, value)
        try:
            content = self._github.get_file_content(task.repo, path)
        except GitHubNotFoundError:
            return None
        except Exception as exc:
            if _NOT_FOUND.search(str(exc)):
                return None
            raise

        if _value(task.rule) != _JSON_PATH:
            return content.encode()
        extension = _file_extension(task.file_path)
        if extension not in (".json", ".toml"):
            raise ExtractionError(f"unsupported file extension: {extension}")
        if extension == ".toml":
            try:
                return toml_to_json(content)
            except ValueError as exc:
                raise ExtractionError(f"failed to transform toml file to json: {exc}") from exc
        return content.encode()

    def _json_api_data(self, task: Task, value: str) -> bytes:
        url = replace_placeholder(task.uri, value)
        headers: dict[str, str] = {}
        if task.auth is not None:
            headers[task.auth.header] = self._config.get(task.auth.token_var)
        return self._json_service.get(url, headers)

    def _prometheus_data(self, task: Task, value: str) -> bytes:
        query = replace_placeholder(task.prometheus_query, value)
        try:
            response = self._prometheus.instant_query(query)
        except Exception as exc:
            raise ExtractionError(f"failed to query prometheus: {exc}") from exc
        return _number_json(response)