"""Framework-neutral data types."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal, TypeAlias

Params: TypeAlias = dict[str, Any]
ResultType: TypeAlias = Literal["output", "value", "eval"]

RESULT_TYPES: tuple[str, ...] = ("output", "value", "eval")


class Symbol(str):
    """A bare interpreter identifier, printed without quotes."""

    __slots__ = ()

    def __repr__(self) -> str:
        return f"Symbol({str.__repr__(self)})"


class _HLine:
    """Horizontal separator row of a host table."""

    _instance: _HLine | None = None

    def __new__(cls) -> _HLine:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "HLINE"


HLINE = _HLine()


class ResultShape(Enum):
    """Shape of a value captured from a session."""

    SCALAR = "scalar"
    STRUCTURED = "structured"


@dataclass(frozen=True)
class ExecutionRequest:
    """One block evaluation, built per invocation."""

    body: str
    bindings: tuple[tuple[str, Any], ...] = field(default_factory=tuple)
    result_type: ResultType = "value"
    isolate: bool = False
    session: str | None = None

    @property
    def needs_classification(self) -> bool:
        return self.result_type in ("value", "eval")
