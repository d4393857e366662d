"""Run expanded source text in a live session and collect its result."""

from __future__ import annotations

from typing import Any

from loguru import logger

from babel_magma.classify import ResultClassifier
from babel_magma.config import Settings
from babel_magma.expand import quote_string
from babel_magma.literal import parse_literal
from babel_magma.session import Session
from babel_magma.transport import CancellationToken
from babel_magma.types import ResultShape, ResultType


def trim_transcript(transcript: str, sentinel: str, prompt: str = "") -> str:
    """Return the session output that precedes the sentinel line.

    ``transcript`` ends with the sentinel line, as returned by a read-until
    call. A leading run of ``prompt`` is stripped from every line. The
    sentinel line and anything after it are dropped, and so is the line just
    before it when that line echoes the sentinel ``print`` statement.
    """

    lines = [_strip_prompt(line, prompt) for line in transcript.split("\n")]
    index = _last_sentinel_index(lines, sentinel)
    if index is None:
        return transcript
    output = lines[:index]
    if output and output[-1].strip() == f"print {quote_string(sentinel)};":
        output.pop()
    return "\n".join(output)


def _strip_prompt(line: str, prompt: str) -> str:
    if not prompt:
        return line
    while line.startswith(prompt):
        line = line[len(prompt) :]
    return line


def _last_sentinel_index(lines: list[str], sentinel: str) -> int | None:
    for index in range(len(lines) - 1, -1, -1):
        if lines[index].rstrip() == sentinel:
            return index
    return None


class SessionExecutor:
    """Send code to a session, wait for the sentinel and shape the result."""

    def __init__(self, settings: Settings, *, classifier: ResultClassifier | None = None) -> None:
        self._settings = settings
        self._classifier = classifier or ResultClassifier()

    def round_trip(self, session: Session, text: str, *, cancel: CancellationToken | None = None) -> str:
        """Send ``text`` followed by the sentinel print and return the trimmed output."""

        sentinel = self._settings.sentinel
        session.transport.send(f"{text}\nprint {quote_string(sentinel)};")
        transcript = session.transport.read_until(
            sentinel,
            line_prefix=session.prompt,
            timeout=self._settings.session_timeout,
            cancel=cancel,
        )
        return trim_transcript(transcript, sentinel, session.prompt)

    def execute(
        self,
        session: Session,
        expanded: str,
        result_type: ResultType,
        *,
        cancel: CancellationToken | None = None,
    ) -> Any:
        raw = self.round_trip(session, expanded, cancel=cancel)
        logger.debug("session.output buffer={} chars={}", session.buffer_name, len(raw))
        if result_type == "output":
            return raw

        shape = self._classifier.classify(session, raw, round_trip=self.round_trip, cancel=cancel)
        if shape is ResultShape.STRUCTURED:
            return parse_literal(raw)
        return raw
