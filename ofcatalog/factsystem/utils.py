"""Helpers for fact extraction: jq-style queries, placeholders and list casts."""

import json
import operator
import re
from collections.abc import Callable, Iterator
from typing import Any, TypeVar

__all__ = [
    "QueryError",
    "inspect_extracted_data",
    "inspect_extracted_data_with_regex",
    "replace_placeholder",
    "to_list",
]

T = TypeVar("T")
_Filter = Callable[[Any], Iterator[Any]]


class QueryError(ValueError):
    """Raised when a query or pattern is invalid or fails on the data."""


# --- value helpers -----------------------------------------------------------


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return "object"


def _truthy(value: Any) -> bool:
    return value is not None and value is not False


def _field(value: Any, name: str) -> Any:
    if value is None:
        return None
    if isinstance(value, dict):
        return value.get(name)
    raise QueryError(f'cannot index {_type_name(value)} with "{name}"')


def _index(value: Any, idx: Any) -> Any:
    if isinstance(idx, str):
        return _field(value, idx)
    if isinstance(idx, (int, float)) and not isinstance(idx, bool):
        if value is None:
            return None
        if isinstance(value, list):
            position = int(idx)
            if position < 0:
                position += len(value)
            return value[position] if 0 <= position < len(value) else None
        raise QueryError(f"cannot index {_type_name(value)} with number")
    raise QueryError(f"cannot index {_type_name(value)} with {_type_name(idx)}")


def _iterate(value: Any) -> Iterator[Any]:
    if isinstance(value, list):
        return iter(value)
    if isinstance(value, dict):
        return iter(value.values())
    raise QueryError(f"cannot iterate over: {_type_name(value)}")


def _recurse(value: Any) -> Iterator[Any]:
    yield value
    if isinstance(value, (list, dict)):
        for child in _iterate(value):
            yield from _recurse(child)


def _length(value: Any) -> Any:
    if value is None:
        return 0
    if isinstance(value, bool):
        raise QueryError("boolean has no length")
    if isinstance(value, (int, float)):
        return abs(value)
    return len(value)


def _keys(value: Any) -> list:
    if isinstance(value, dict):
        return sorted(value)
    if isinstance(value, list):
        return list(range(len(value)))
    raise QueryError(f"{_type_name(value)} has no keys")


_COMPARATORS = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


def _compare(op: Callable[[Any, Any], bool], left: Any, right: Any) -> bool:
    try:
        return op(left, right)
    except TypeError:
        raise QueryError(f"cannot compare {_type_name(left)} and {_type_name(right)}") from None


def _const(value: Any) -> _Filter:
    return lambda _v: iter((value,))


def _then(prev: _Filter, step: _Filter) -> _Filter:
    return lambda v: (y for x in prev(v) for y in step(x))


def _try(fn: _Filter) -> _Filter:
    def run(value: Any) -> Iterator[Any]:
        try:
            yield from fn(value)
        except QueryError:
            return

    return run


# --- query parser ------------------------------------------------------------

_LEXEME_RE = re.compile(
    r"(?P<num>\d+(?:\.\d+)?(?:[eE][+-]?\d+)?)"
    r'|(?P<str>"(?:[^"\\]|\\.)*")'
    r"|(?P<ident>[A-Za-z_][A-Za-z0-9_]*)"
    r"|(?P<op>==|!=|<=|>=|\.\.|[.\[\]|,()?<>])"
)


def _lex(query: str) -> list[tuple[str, str]]:
    lexemes = []
    pos = 0
    while pos < len(query):
        if query[pos].isspace():
            pos += 1
            continue
        match = _LEXEME_RE.match(query, pos)
        if not match:
            raise QueryError(f"unexpected character {query[pos]!r} in query")
        lexemes.append((match.lastgroup, match.group()))
        pos = match.end()
    return lexemes


class _Parser:
    def __init__(self, query: str) -> None:
        self._lexemes = _lex(query)
        self._pos = 0

    def _peek(self, offset: int = 0) -> tuple[str, str]:
        i = self._pos + offset
        return self._lexemes[i] if i < len(self._lexemes) else ("end", "")

    def _next(self) -> tuple[str, str]:
        lexeme = self._peek()
        self._pos += 1
        return lexeme

    def _accept(self, text: str) -> bool:
        kind, value = self._peek()
        if kind in ("op", "ident") and value == text:
            self._pos += 1
            return True
        return False

    def _expect(self, text: str) -> None:
        if not self._accept(text):
            raise QueryError(f"expected {text!r} in query")

    def parse(self) -> _Filter:
        fn = self._pipe()
        kind, value = self._peek()
        if kind != "end":
            raise QueryError(f"unexpected token {value!r} in query")
        return fn

    def _pipe(self) -> _Filter:
        left = self._comma()
        while self._accept("|"):
            left = _then(left, self._comma())
        return left

    def _comma(self) -> _Filter:
        left = self._comparison()
        while self._accept(","):
            right = self._comparison()
            left = (lambda a, b: lambda v: (x for f in (a, b) for x in f(v)))(left, right)
        return left

    def _comparison(self) -> _Filter:
        left = self._postfix()
        kind, text = self._peek()
        if kind == "op" and text in _COMPARATORS:
            self._pos += 1
            right = self._postfix()
            op = _COMPARATORS[text]
            return lambda v: (_compare(op, lv, rv) for rv in right(v) for lv in left(v))
        return left

    def _name(self) -> str:
        kind, text = self._next()
        return json.loads(text) if kind == "str" else text

    def _postfix(self) -> _Filter:
        fn = self._term()
        while True:
            kind, text = self._peek()
            if kind != "op":
                break
            if text == "." and self._peek(1)[0] in ("ident", "str"):
                self._pos += 1
                name = self._name()
                fn = _then(fn, lambda x, n=name: iter((_field(x, n),)))
            elif text == "." and self._peek(1) == ("op", "["):
                self._pos += 1
            elif text == "[":
                self._pos += 1
                fn = self._bracket(fn)
            elif text == "?":
                self._pos += 1
                fn = _try(fn)
            else:
                break
        return fn

    def _bracket(self, prev: _Filter) -> _Filter:
        if self._accept("]"):
            return lambda v: (y for x in prev(v) for y in _iterate(x))
        index_fn = self._pipe()
        self._expect("]")
        return lambda v: (_index(x, i) for x in prev(v) for i in index_fn(v))

    def _term(self) -> _Filter:
        kind, text = self._next()
        if kind == "end":
            raise QueryError("unexpected end of query")
        if kind == "num":
            return _const(json.loads(text))
        if kind == "str":
            return _const(json.loads(text))
        if kind == "op":
            if text == ".":
                if self._peek()[0] in ("ident", "str"):
                    name = self._name()
                    return lambda v: iter((_field(v, name),))
                return lambda v: iter((v,))
            if text == "..":
                return _recurse
            if text == "[":
                if self._accept("]"):
                    return lambda v: iter(([],))
                inner = self._pipe()
                self._expect("]")
                return lambda v: iter((list(inner(v)),))
            if text == "(":
                inner = self._pipe()
                self._expect(")")
                return inner
            raise QueryError(f"unexpected token {text!r} in query")
        return self._builtin(text)

    def _builtin(self, name: str) -> _Filter:
        constants = {"true": True, "false": False, "null": None}
        if name in constants:
            return _const(constants[name])
        if name == "empty":
            return lambda v: iter(())
        if name == "length":
            return lambda v: iter((_length(v),))
        if name == "keys":
            return lambda v: iter((_keys(v),))
        if name == "not":
            return lambda v: iter((not _truthy(v),))
        if name == "select":
            self._expect("(")
            cond = self._pipe()
            self._expect(")")
            return lambda v: (v for c in cond(v) if _truthy(c))
        raise QueryError(f"function not defined: {name}")


# --- public API --------------------------------------------------------------


def inspect_extracted_data(json_path: str, json_data: bytes | str) -> list[Any]:
    """Run a jq-style query over JSON data and return every result."""
    query = _Parser(json_path).parse()
    try:
        data = json.loads(json_data)
    except (TypeError, ValueError) as exc:
        raise QueryError(f"invalid JSON data: {exc}") from exc
    return list(query(data))


def inspect_extracted_data_with_regex(pattern: str, json_data: bytes | str) -> list[bytes]:
    """Return every non-overlapping match of ``pattern`` in the data."""
    if isinstance(json_data, str):
        json_data = json_data.encode()
    try:
        compiled = re.compile(pattern.encode())
    except re.error as exc:
        raise QueryError(f"invalid pattern: {exc}") from exc
    return [match.group() for match in compiled.finditer(json_data)]


_PLACEHOLDER = re.compile(r":[a-zA-Z_]+")


def replace_placeholder(target: str, value: str) -> str:
    """Replace every ``:name`` placeholder in ``target`` with ``value``."""
    return _PLACEHOLDER.sub(lambda _m: value, target)


def to_list(value: Any, item_type: type[T]) -> list[T]:
    """Check that ``value`` is a list whose items are all of ``item_type``."""
    if not isinstance(value, (list, tuple)):
        raise TypeError(f"expected a slice, got {type(value).__name__}")
    result: list[T] = []
    for item in value:
        if item_type is float and isinstance(item, int) and not isinstance(item, bool):
            item = float(item)
        if not isinstance(item, item_type) or (
            item_type in (int, float) and isinstance(item, bool)
        ):
            raise TypeError(
                f"invalid type, expected {item_type.__name__}, got {type(item).__name__}"
            )
        result.append(item)
    return result