"""Read block header parameters into an execution request."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, cast

from babel_magma.errors import ConfigurationError
from babel_magma.literal import parse_literal
from babel_magma.types import RESULT_TYPES, ExecutionRequest, Params, ResultType

DEFAULT_HEADER_ARGS: Params = {":session": "none", ":result-type": "value"}

_TRUE_WORDS = frozenset({"t", "yes", "true", "on", "1"})
_FALSE_WORDS = frozenset({"nil", "no", "false", "off", "0", ""})


def build_request(body: str, params: Mapping[str, Any]) -> ExecutionRequest:
    merged: dict[str, Any] = dict(DEFAULT_HEADER_ARGS)
    merged.update(params)
    return ExecutionRequest(
        body=body,
        bindings=parse_vars(merged.get(":var")),
        result_type=parse_result_type(merged.get(":result-type")),
        isolate=parse_flag(merged.get(":magma-eval")),
        session=_optional_str(merged.get(":session")),
    )


def parse_result_type(raw: Any) -> ResultType:
    if raw is None:
        return "value"
    value = str(raw).strip()
    if value not in RESULT_TYPES:
        raise ConfigurationError(f"unknown :result-type {value!r}, expected one of {', '.join(RESULT_TYPES)}")
    return cast(ResultType, value)


def parse_flag(raw: Any) -> bool:
    if raw is None:
        return False
    if isinstance(raw, bool):
        return raw
    word = str(raw).strip().casefold()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    raise ConfigurationError(f"expected a yes/no value, got {raw!r}")


def parse_vars(raw: Any) -> tuple[tuple[str, Any], ...]:
    """Normalize ``:var`` into ordered ``(name, value)`` pairs.

    Accepts a mapping, one ``"name=value"`` string, or a sequence mixing
    ``(name, value)`` pairs and ``"name=value"`` strings. Values given as text
    are decoded as literals, so ``"xs=[1, 2]"`` binds a list.
    """

    if raw is None:
        return ()
    if isinstance(raw, Mapping):
        return tuple((_check_name(str(name)), value) for name, value in raw.items())
    if isinstance(raw, str):
        return (_parse_assignment(raw),)
    if isinstance(raw, Sequence):
        pairs: list[tuple[str, Any]] = []
        for item in raw:
            if isinstance(item, str):
                pairs.append(_parse_assignment(item))
            elif isinstance(item, Sequence) and len(item) == 2:
                pairs.append((_check_name(str(item[0])), item[1]))
            else:
                raise ConfigurationError(f"cannot read :var entry {item!r}")
        return tuple(pairs)
    raise ConfigurationError(f"cannot read :var value {raw!r}")


def _parse_assignment(text: str) -> tuple[str, Any]:
    name, sep, value = text.partition("=")
    if not sep:
        raise ConfigurationError(f":var entry {text!r} is not name=value")
    return _check_name(name.strip()), parse_literal(value.strip())


def _check_name(name: str) -> str:
    if not name.isidentifier():
        raise ConfigurationError(f"invalid variable name {name!r}")
    return name


def _optional_str(raw: Any) -> str | None:
    if raw is None:
        return None
    return str(raw)
