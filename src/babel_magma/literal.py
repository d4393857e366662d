"""Decode printed Magma values into plain Python values.

Sequences, sets and tuples (``[..]``, ``{..}``, ``<..>``) become nested lists,
double-quoted strings are unescaped and numeric atoms become ``int`` or
``float``. Everything else stays text.
"""

from __future__ import annotations

import re
from typing import Any

from babel_magma.errors import LiteralParseError

_OPENERS = {"[": "]", "{": "}", "<": ">"}
# Magma spells indexed sets and multisets as {@ .. @} and {* .. *}.
_DECORATED_OPENERS = {"{@": "@}", "{*": "*}"}
_INT_RE = re.compile(r"^[+-]?\d+$")
_FLOAT_RE = re.compile(r"^[+-]?(\d+\.\d*|\.\d+|\d+)([eE][+-]?\d+)?$")


def parse_literal(text: str, *, strict: bool = False) -> Any:
    """Parse ``text`` as a nested literal.

    Text that is neither a bracketed or quoted literal nor a number is
    returned unchanged, surrounding whitespace included. With ``strict``
    unset, a malformed literal is returned unchanged too.
    """

    stripped = text.strip()
    try:
        value = _Reader(stripped).read_all()
    except LiteralParseError:
        if strict:
            raise
        return text
    if isinstance(value, str) and not stripped.startswith('"'):
        return text
    return value


def coerce_atom(token: str) -> Any:
    token = token.strip()
    if _INT_RE.match(token):
        return int(token)
    if _FLOAT_RE.match(token):
        return float(token)
    return token


class _Reader:
    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0

    def read_all(self) -> Any:
        if not self._text:
            return ""
        if self._text[0] not in _OPENERS and self._text[0] != '"':
            return coerce_atom(self._text)
        value = self._read_value(closers=())
        self._skip_space()
        if self._pos != len(self._text):
            raise LiteralParseError(f"trailing text at offset {self._pos}")
        return value

    def _read_value(self, closers: tuple[str, ...]) -> Any:
        self._skip_space()
        if self._at_end():
            raise LiteralParseError("unexpected end of text")
        for opener, closer in _DECORATED_OPENERS.items():
            if self._text.startswith(opener, self._pos):
                self._pos += len(opener)
                return self._read_sequence(closer)
        char = self._text[self._pos]
        if char in _OPENERS:
            self._pos += 1
            return self._read_sequence(_OPENERS[char])
        if char == '"':
            return self._read_string()
        return self._read_atom(closers)

    def _read_sequence(self, closer: str) -> list[Any]:
        items: list[Any] = []
        self._skip_space()
        if self._text.startswith(closer, self._pos):
            self._pos += len(closer)
            return items
        while True:
            items.append(self._read_value(closers=(",", closer)))
            self._skip_space()
            if self._text.startswith(closer, self._pos):
                self._pos += len(closer)
                return items
            if self._at_end() or self._text[self._pos] != ",":
                raise LiteralParseError(f"expected ',' or {closer!r} at offset {self._pos}")
            self._pos += 1

    def _read_string(self) -> str:
        self._pos += 1
        chars: list[str] = []
        while not self._at_end():
            char = self._text[self._pos]
            if char == "\\" and self._pos + 1 < len(self._text):
                chars.append(self._text[self._pos + 1])
                self._pos += 2
                continue
            if char == '"':
                self._pos += 1
                return "".join(chars)
            chars.append(char)
            self._pos += 1
        raise LiteralParseError("unterminated string")

    def _read_atom(self, closers: tuple[str, ...]) -> Any:
        start = self._pos
        depth = 0
        while not self._at_end():
            char = self._text[self._pos]
            if depth == 0 and any(self._text.startswith(closer, self._pos) for closer in closers):
                break
            if char == "(":
                depth += 1
            elif char == ")":
                depth -= 1
            self._pos += 1
        token = self._text[start : self._pos]
        if not token.strip() and not closers:
            raise LiteralParseError(f"empty atom at offset {start}")
        return coerce_atom(token)

    def _skip_space(self) -> None:
        while not self._at_end() and self._text[self._pos].isspace():
            self._pos += 1

    def _at_end(self) -> bool:
        return self._pos >= len(self._text)
