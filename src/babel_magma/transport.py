"""Line-oriented transport to an interactive child process."""

from __future__ import annotations

import re
import threading
import time
from collections.abc import Sequence
from typing import Protocol

import pexpect
from loguru import logger

from babel_magma.errors import SessionClosedError, SessionStartError, TransportCancelled, TransportTimeout

DEFAULT_POLL_INTERVAL = 0.5


class CancellationToken:
    """Flag checked between read slices of a pending read."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


class ProcessTransport(Protocol):
    """Duplex text stream to one child process."""

    def send(self, text: str) -> None: ...

    def read_until(
        self,
        marker: str,
        *,
        own_line: bool = True,
        line_prefix: str | Sequence[str] = "",
        timeout: float | None = None,
        cancel: CancellationToken | None = None,
    ) -> str: ...

    def is_alive(self) -> bool: ...

    def close(self) -> None: ...


class PexpectTransport:
    """Transport backed by a pexpect pseudo-terminal child."""

    def __init__(self, child: pexpect.spawn, *, poll_interval: float = DEFAULT_POLL_INTERVAL) -> None:
        self._child = child
        self._poll_interval = poll_interval

    @classmethod
    def spawn(
        cls,
        command: str,
        args: Sequence[str] = (),
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> PexpectTransport:
        try:
            child = pexpect.spawn(command, list(args), encoding="utf-8", codec_errors="replace", echo=False)
        except (pexpect.ExceptionPexpect, OSError) as exc:
            raise SessionStartError(f"cannot start {command!r}: {exc}") from exc
        logger.debug("transport.spawn command={} pid={}", command, child.pid)
        return cls(child, poll_interval=poll_interval)

    @property
    def pid(self) -> int | None:
        return self._child.pid

    def send(self, text: str) -> None:
        for line in text.split("\n"):
            self._child.sendline(line)

    def read_until(
        self,
        marker: str,
        *,
        own_line: bool = True,
        line_prefix: str | Sequence[str] = "",
        timeout: float | None = None,
        cancel: CancellationToken | None = None,
    ) -> str:
        """Read output up to and including ``marker``.

        With ``own_line`` set the marker only matches as a complete line,
        optionally preceded by any run of ``line_prefix`` (a prompt, or several
        prompts the child may show in turn). The returned text uses ``\\n``
        line endings. ``timeout=None`` waits forever.
        """

        pattern = _marker_pattern(marker, own_line=own_line, line_prefix=line_prefix)
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            if cancel is not None and cancel.cancelled:
                raise TransportCancelled(f"read cancelled while waiting for {marker!r}")
            slice_seconds = self._poll_interval
            if deadline is not None:
                slice_seconds = max(0.0, min(slice_seconds, deadline - time.monotonic()))
            try:
                self._child.expect(pattern, timeout=slice_seconds)
            except pexpect.TIMEOUT:
                if deadline is not None and time.monotonic() >= deadline:
                    raise TransportTimeout(f"no {marker!r} within {timeout}s") from None
                continue
            except pexpect.EOF as exc:
                raise SessionClosedError(f"process exited while waiting for {marker!r}") from exc
            return _normalize_newlines(f"{self._child.before}{self._child.after}")

    def is_alive(self) -> bool:
        return bool(self._child.isalive())

    def close(self) -> None:
        self._child.close(force=True)


def _marker_pattern(marker: str, *, own_line: bool, line_prefix: str | Sequence[str] = "") -> re.Pattern[str]:
    if own_line:
        prefixes = [line_prefix] if isinstance(line_prefix, str) else list(line_prefix)
        alternatives = "|".join(re.escape(prefix) for prefix in prefixes if prefix)
        prefix = f"(?:{alternatives})*" if alternatives else ""
        return re.compile(r"(?:\A|\n)" + prefix + re.escape(marker) + r"\r?\n")
    return re.compile(re.escape(marker))


def _normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n")
