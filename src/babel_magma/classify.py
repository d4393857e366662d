"""Decide whether captured session output is a table or plain text."""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import TypeAlias

from loguru import logger

from babel_magma.expand import quote_string
from babel_magma.session import RESULT_TYPE_HELPER, Session
from babel_magma.transport import CancellationToken
from babel_magma.types import ResultShape

_TABLE_TAG = re.compile(r"table\s*$")

RoundTrip: TypeAlias = Callable[..., str]


def tag_is_structured(tag: str) -> bool:
    """True when the type tag ends with ``table``, trailing whitespace allowed."""

    return _TABLE_TAG.search(tag) is not None


def classification_query(raw: str) -> str:
    return f"print {RESULT_TYPE_HELPER}({quote_string(raw)});"


class ResultClassifier:
    """Ask the session itself what type the captured text evaluates to."""

    def classify(
        self,
        session: Session,
        raw: str,
        *,
        round_trip: RoundTrip,
        cancel: CancellationToken | None = None,
    ) -> ResultShape:
        output = round_trip(session, classification_query(raw), cancel=cancel)
        tag = output.split("\n", 1)[0]
        shape = ResultShape.STRUCTURED if tag_is_structured(tag) else ResultShape.SCALAR
        logger.debug("session.classify buffer={} tag={!r} shape={}", session.buffer_name, tag, shape.value)
        return shape
