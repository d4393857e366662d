from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from typing import Any

import pytest

from babel_magma.config import Settings
from babel_magma.session import RESULT_TYPE_HELPER
from babel_magma.transport import CancellationToken

SENTINEL = "EOE"
PROMPT = "> "
_QUERY_RE = re.compile(re.escape(RESULT_TYPE_HELPER) + r'\("(?P<arg>.*)"\);', re.DOTALL)


def default_responder(statements: str) -> str:
    """Answer the handful of statements the tests send to a session."""

    if "SetPrompt" in statements:
        return ""
    query = _QUERY_RE.search(statements)
    if query is not None:
        return "table" if query.group("arg").lstrip().startswith("[") else "string"
    if "print 1+1;" in statements:
        return "2"
    if "[1, 2, 3]" in statements or "xs;" in statements:
        return "[ 1, 2, 3 ]"
    if "Matrix" in statements:
        return "[ [ 1, 2 ], [ 3, 4 ] ]"
    return ""


class FakeMagmaTransport:
    """In-memory stand-in for an interactive Magma process."""

    def __init__(self, responder: Callable[[str], str] = default_responder, *, banner: str = "Magma V2.28\n") -> None:
        self.responder = responder
        self.banner = banner
        self.sent: list[str] = []
        self.reads: list[dict[str, Any]] = []
        self.alive = True
        self.closed = False
        self._pending = ""

    def send(self, text: str) -> None:
        self.sent.append(text)
        self._pending = text

    def read_until(
        self,
        marker: str,
        *,
        own_line: bool = True,
        line_prefix: str | Sequence[str] = "",
        timeout: float | None = None,
        cancel: CancellationToken | None = None,
    ) -> str:
        self.reads.append({"marker": marker, "own_line": own_line, "line_prefix": line_prefix, "timeout": timeout})
        if not own_line:
            return f"{self.banner}{marker}"
        # Echo is off on the pty, so output follows the prompt directly.
        output = self.responder(self._pending)
        if not output:
            return f"{PROMPT}{PROMPT}{marker}\n"
        return f"{PROMPT}{output}\n{PROMPT}{marker}\n"

    def is_alive(self) -> bool:
        return self.alive and not self.closed

    def close(self) -> None:
        self.closed = True


class TransportFactoryRecorder:
    """Transport factory that records every spawn."""

    def __init__(self, responder: Callable[[str], str] = default_responder) -> None:
        self.responder = responder
        self.spawned: list[tuple[str, list[str], FakeMagmaTransport]] = []

    def __call__(self, command: str, args: Sequence[str]) -> FakeMagmaTransport:
        transport = FakeMagmaTransport(self.responder)
        self.spawned.append((command, list(args), transport))
        return transport


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, sentinel=SENTINEL, prompt=PROMPT, magma_command="magma")


@pytest.fixture
def transport_factory() -> TransportFactoryRecorder:
    return TransportFactoryRecorder()
