"""Turn a code block and its variable bindings into Magma source text."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from babel_magma.types import HLINE, Symbol

_ISOLATED_PREFIX = 'eval "'
_ISOLATED_SUFFIX = '";'


def magma_literal(value: Any) -> str:
    """Encode one host value as Magma literal text.

    Sequences become ``[e1, e2, ...]``, the separator row becomes an empty
    fragment, strings are quoted and numbers use their printed form. Values of
    any other type are quoted as strings.
    """

    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(magma_literal(item) for item in value) + "]"
    if value is HLINE or value is None:
        return ""
    if isinstance(value, Symbol):
        return str(value)
    if isinstance(value, str):
        return quote_string(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    return quote_string(str(value))


def quote_string(text: str) -> str:
    return '"' + _escape(text) + '"'


def wrap_isolated(body: str) -> str:
    """Wrap ``body`` so Magma evaluates it without touching session state."""

    return f"{_ISOLATED_PREFIX}{_escape(body)}{_ISOLATED_SUFFIX}"


def unwrap_isolated(text: str) -> str:
    """Recover the body from text produced by :func:`wrap_isolated`."""

    if not (text.startswith(_ISOLATED_PREFIX) and text.endswith(_ISOLATED_SUFFIX)):
        raise ValueError("text is not an isolated evaluation form")
    return _unescape(text[len(_ISOLATED_PREFIX) : -len(_ISOLATED_SUFFIX)])


def assignment_line(name: str, value: Any) -> str:
    return f"{name} := eval {magma_literal(value)};"


def expand_body(body: str, bindings: Iterable[tuple[str, Any]] = (), *, isolate: bool = False) -> str:
    """Build the final source text sent to Magma.

    One assignment line per binding, in the given order, then the body. When
    ``isolate`` is set the body is wrapped in an ``eval "..."`` form.
    """

    assignments = "\n".join(assignment_line(name, value) for name, value in bindings)
    source = wrap_isolated(body) if isolate else body
    return f"{assignments}\n{source}"


def _escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


def _unescape(text: str) -> str:
    chars: list[str] = []
    index = 0
    while index < len(text):
        char = text[index]
        if char == "\\" and index + 1 < len(text):
            chars.append(text[index + 1])
            index += 2
            continue
        chars.append(char)
        index += 1
    return "".join(chars)
