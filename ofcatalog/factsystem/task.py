"""Task definitions of the fact system."""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

__all__ = ["TaskType", "TaskRule", "TaskSource", "TaskMethod", "TaskAuth", "Task"]


class TaskType(StrEnum):
    AGGREGATE = "aggregate"
    EXTRACT = "extract"
    VALIDATE = "validate"


class TaskRule(StrEnum):
    JSON_PATH = "jsonpath"
    NOT_EMPTY = "notempty"
    SEARCH = "search"
    DEPS_MATCH = "deps_match"
    UNIQUE = "unique"
    REGEX_MATCH = "regex_match"
    FORMULA = "formula"


class TaskSource(StrEnum):
    GITHUB = "github"
    JSON_API = "jsonapi"
    PROMETHEUS = "prometheus"


class TaskMethod(StrEnum):
    COUNT = "count"
    SUM = "sum"
    AND = "and"
    OR = "or"


@dataclass
class TaskAuth:
    """Header to set and the environment variable holding its value."""

    header: str = ""
    token_var: str = ""


@dataclass(eq=False)
class Task:
    """One step of a fact: extract, validate or aggregate."""

    id: str = ""
    name: str = ""
    type: str = ""
    depends_on: list[str] = field(default_factory=list)
    source: str = ""
    uri: str = ""
    json_path: str = ""
    auth: TaskAuth | None = None
    prometheus_query: str = ""
    repo: str = ""
    file_path: str = ""
    search_string: str = ""
    rule: str = ""
    pattern: str = ""
    method: str = ""
    result: Any = None
    dependencies: list["Task"] = field(default_factory=list, repr=False)

    def is_equal(self, other: "Task | None") -> bool:
        """Compare the defining fields and the result of two tasks."""
        if other is None:
            return False
        return (
            self.id == other.id
            and self.name == other.name
            and self.type == other.type
            and self.source == other.source
            and self.uri == other.uri
            and self.json_path == other.json_path
            and self.auth == other.auth
            and self.repo == other.repo
            and self.file_path == other.file_path
            and self.rule == other.rule
            and self.pattern == other.pattern
            and self.method == other.method
            and self.result == other.result
            and self.search_string == other.search_string
            and self.prometheus_query == other.prometheus_query
            and self.is_depends_on_equal(other.depends_on)
        )

    def is_depends_on_equal(self, depends_on: list[str]) -> bool:
        """True when the dependency ids match in the same order."""
        return list(self.depends_on) == list(depends_on)