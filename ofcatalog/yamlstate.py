"""Reading and writing YAML definitions and state files."""

import dataclasses
import logging
import os
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TypeVar

import yaml

__all__ = [
    "STATE_LOCATION",
    "METRIC_STATE_LOCATION",
    "SCORECARD_STATE_LOCATION",
    "COMPONENT_STATE_LOCATION",
    "ParseInput",
    "get_state_input",
    "get_metric_state_input",
    "get_scorecard_state_input",
    "get_component_state_input",
    "get_kind_from_generic",
    "parse",
    "parse_filtered",
    "sort_results",
    "write_state",
    "write_metric_states",
    "write_scorecard_states",
    "write_component_states",
]

_log = logging.getLogger(__name__)

T = TypeVar("T")

STATE_LOCATION = ".state"
METRIC_STATE_LOCATION = ".state/metric"
SCORECARD_STATE_LOCATION = ".state/scorecard"
COMPONENT_STATE_LOCATION = ".state/component"
_DTO = "DTO"
_SPLIT_STATE_LOCATIONS = frozenset(
    {METRIC_STATE_LOCATION, SCORECARD_STATE_LOCATION, COMPONENT_STATE_LOCATION}
)
_GLOB_META = frozenset("*?[{")


@dataclass(frozen=True)
class ParseInput:
    """Where to look for definition files, and whether to descend into folders."""

    root_location: str
    recursive: bool = False


def get_state_input(state_root_location: str) -> ParseInput:
    """Input for the combined state directory; the argument is not used."""
    return ParseInput(STATE_LOCATION, False)


def get_metric_state_input() -> ParseInput:
    """Input for the per-metric state files."""
    return ParseInput(METRIC_STATE_LOCATION, False)


def get_scorecard_state_input() -> ParseInput:
    """Input for the per-scorecard state files."""
    return ParseInput(SCORECARD_STATE_LOCATION, False)


def get_component_state_input() -> ParseInput:
    """Input for the per-component state files."""
    return ParseInput(COMPONENT_STATE_LOCATION, False)


def get_kind_from_generic(type_name: str) -> str:
    """Extract the lower-cased kind from a type name such as ``pkg.MetricDTO``."""
    start = type_name.rfind(".") + 1
    end = type_name.find(_DTO)
    if end == -1 or start >= end:
        raise ValueError("could not extract DTO name from literal type")
    return type_name[start:end].lower()


def _kind_of(dto_type: type) -> str:
    return get_kind_from_generic(f"{dto_type.__module__}.{dto_type.__qualname__}")


def _from_dict(dto_type: type[T], data: Mapping[str, Any]) -> T:
    factory = getattr(dto_type, "from_dict", None)
    if callable(factory):
        return factory(data)
    return dto_type(**data)


def _to_dict(item: Any) -> Any:
    converter = getattr(item, "to_dict", None)
    if callable(converter):
        return converter()
    if dataclasses.is_dataclass(item) and not isinstance(item, type):
        return dataclasses.asdict(item)
    if isinstance(item, Mapping):
        return dict(item)
    raise TypeError(f"cannot encode {type(item).__name__} as YAML")


def _encode(items: Iterable[Any]) -> str:
    return yaml.safe_dump_all(
        [_to_dict(item) for item in items], sort_keys=False, allow_unicode=True
    )


def _split_pattern(pattern: str) -> tuple[Path, str]:
    parts = Path(pattern).parts
    static = 0
    for part in parts:
        if any(char in _GLOB_META for char in part):
            break
        static += 1
    base = Path(*parts[:static]) if static else Path(".")
    return base, "/".join(parts[static:])


def _glob(pattern: str) -> list[Path]:
    base, rest = _split_pattern(pattern)
    if not rest:
        return [base] if base.is_file() else []
    if not base.is_dir():
        return []
    return sorted(path for path in base.glob(rest) if path.is_file())


def _file_pattern(kind: str, parse_input: ParseInput) -> str:
    directory = parse_input.root_location.rstrip(os.sep)
    if parse_input.recursive:
        directory = f"{directory}/**"
    if parse_input.root_location in _SPLIT_STATE_LOCATIONS:
        return os.path.join(directory, "*.yaml")
    return os.path.join(directory, f"{kind}*.yaml")


def _decode_file(kind: str, path: Path, dto_type: type[T]) -> list[T]:
    results: list[T] = []
    for document in yaml.safe_load_all(path.read_text()):
        if document is None:
            continue
        if not isinstance(document, Mapping):
            raise ValueError(
                f"cannot decode {type(document).__name__} into {dto_type.__name__} in {path}"
            )
        item = _from_dict(dto_type, document)
        item_kind = getattr(item, "kind", None)
        if isinstance(item_kind, str) and item_kind.casefold() == kind.casefold():
            results.append(item)
    return results


def _get_definitions(parse_input: ParseInput, dto_type: type[T]) -> list[T]:
    kind = _kind_of(dto_type)
    pattern = _file_pattern(kind, parse_input)
    try:
        return [
            item
            for path in _glob(pattern)
            for item in _decode_file(kind, path, dto_type)
        ]
    except (yaml.YAMLError, ValueError, TypeError, OSError) as exc:
        raise ValueError(
            f'failed to parse files at {parse_input.root_location}: "{pattern}": {exc}'
        ) from exc


def parse(
    parse_input: ParseInput, dto_type: type[T], get_key: Callable[[T], str]
) -> dict[str, T]:
    """Load every definition of ``dto_type`` and key it with ``get_key``."""
    return parse_filtered(parse_input, dto_type, get_key, lambda _item: True)


def parse_filtered(
    parse_input: ParseInput,
    dto_type: type[T],
    get_key: Callable[[T], str],
    keep: Callable[[T], bool],
) -> dict[str, T]:
    """Like :func:`parse`, keeping only the definitions for which ``keep`` is true."""
    return {
        get_key(item): item
        for item in _get_definitions(parse_input, dto_type)
        if keep(item)
    }


def sort_results(results: Iterable[T], get_key: Callable[[T], str]) -> list[T]:
    """Order by key, keeping the last item of each key only."""
    by_key = {get_key(item): item for item in results}
    return [by_key[key] for key in sorted(by_key)]


def write_state(data: list[T], dto_type: type[T]) -> None:
    """Write all items into ``.state/<kind>.yaml``, removing it when there are none."""
    kind = _kind_of(dto_type)
    state_file = Path(STATE_LOCATION) / f"{kind}.yaml"
    state_file.parent.mkdir(parents=True, exist_ok=True)
    if not data:
        state_file.unlink(missing_ok=True)
        return
    state_file.write_text(_encode(data))


def _cleanup_state_directory(directory: Path) -> None:
    if not directory.is_dir():
        return
    for entry in directory.iterdir():
        if entry.is_file() and entry.name.endswith(".yaml"):
            try:
                entry.unlink()
            except OSError as exc:
                raise OSError(f"failed to remove file {entry}: {exc}") from exc


def _write_entity_states(
    data: Iterable[T], get_name: Callable[[T], str], base_dir: str
) -> None:
    directory = Path(base_dir)
    directory.mkdir(parents=True, exist_ok=True)
    _cleanup_state_directory(directory)
    for item in data:
        name = get_name(item)
        path = directory / f"{name}.yaml"
        try:
            content = _encode([item])
        except (TypeError, yaml.YAMLError) as exc:
            raise ValueError(f"failed to encode entity {name}: {exc}") from exc
        try:
            path.write_text(content)
        except OSError as exc:
            raise OSError(f"failed to write entity file {path}: {exc}") from exc


def write_metric_states(data: Iterable[T], get_name: Callable[[T], str]) -> None:
    """Write each metric to its own file under ``.state/metric``."""
    _write_entity_states(data, get_name, METRIC_STATE_LOCATION)


def write_scorecard_states(data: Iterable[T], get_name: Callable[[T], str]) -> None:
    """Write each scorecard to its own file under ``.state/scorecard``."""
    _write_entity_states(data, get_name, SCORECARD_STATE_LOCATION)


def write_component_states(data: Iterable[T], get_name: Callable[[T], str]) -> None:
    """Write each component to its own file under ``.state/component``."""
    _write_entity_states(data, get_name, COMPONENT_STATE_LOCATION)