"""Named interactive Magma sessions."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TypeAlias

from loguru import logger

from babel_magma.config import Settings
from babel_magma.errors import SessionStartError, TransportError
from babel_magma.expand import quote_string
from babel_magma.transport import PexpectTransport, ProcessTransport

NO_SESSION_VALUES = frozenset({"", "none"})
RESULT_TYPE_HELPER = "OrgBabelMagmaResultType"

# Reports "table" for values the host can show as a table and "string" for
# everything else, including text that does not evaluate.
RESULT_TYPE_HELPER_SOURCE = f"""function {RESULT_TYPE_HELPER}(s)
    try
        x := eval s;
    catch e
        return "string";
    end try;
    return Type(x) in {{SeqEnum, List, Tup}} select "table" else "string";
end function;"""

TransportFactory: TypeAlias = Callable[[str, Sequence[str]], ProcessTransport]


@dataclass
class Session:
    """One live Magma process registered under a buffer name."""

    name: str
    buffer_name: str
    transport: ProcessTransport
    prompt: str

    def is_alive(self) -> bool:
        return self.transport.is_alive()


class SessionRegistry:
    """Process-wide map of buffer name to live session, owned by the host."""

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}

    def get(self, buffer_name: str) -> Session | None:
        return self._sessions.get(buffer_name)

    def add(self, session: Session) -> None:
        self._sessions[session.buffer_name] = session

    def discard(self, buffer_name: str) -> Session | None:
        return self._sessions.pop(buffer_name, None)

    def names(self) -> list[str]:
        return sorted(name for name, session in self._sessions.items() if session.is_alive())

    def prune(self) -> list[str]:
        """Forget sessions whose process has exited."""

        dead = [name for name, session in self._sessions.items() if not session.is_alive()]
        for name in dead:
            del self._sessions[name]
        return dead

    def close_all(self) -> None:
        for name, session in list(self._sessions.items()):
            try:
                session.transport.close()
            except Exception:
                logger.opt(exception=True).warning("session.close_failed buffer={}", name)
        self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, buffer_name: object) -> bool:
        return buffer_name in self._sessions


def canonical_session_name(name: str | None, default: str) -> str:
    if name is None or name.strip().casefold() in NO_SESSION_VALUES:
        return default
    return name.strip()


def buffer_name(name: str) -> str:
    return f"*{name}*"


def default_transport_factory(settings: Settings) -> TransportFactory:
    def _spawn(command: str, args: Sequence[str]) -> ProcessTransport:
        return PexpectTransport.spawn(command, args, poll_interval=settings.poll_interval)

    return _spawn


class SessionManager:
    """Find or start the Magma process behind a session name."""

    def __init__(
        self,
        registry: SessionRegistry,
        settings: Settings,
        *,
        transport_factory: TransportFactory | None = None,
    ) -> None:
        self._registry = registry
        self._settings = settings
        self._transport_factory = transport_factory or default_transport_factory(settings)

    @property
    def registry(self) -> SessionRegistry:
        return self._registry

    def ensure_session(self, name: str | None) -> Session:
        session_name = canonical_session_name(name, self._settings.default_session)
        key = buffer_name(session_name)
        existing = self._registry.get(key)
        if existing is not None:
            if existing.is_alive():
                return existing
            logger.warning("session.dead buffer={} restarting", key)
            self._registry.discard(key)

        transport = self._transport_factory(self._settings.magma_command, self._settings.magma_args)
        session = Session(name=session_name, buffer_name=key, transport=transport, prompt=self._settings.prompt)
        try:
            self._initialize(session)
        except TransportError as exc:
            transport.close()
            raise SessionStartError(f"session {session_name!r} did not initialize: {exc}") from exc
        self._registry.add(session)
        logger.info("session.start name={} buffer={}", session_name, key)
        return session

    def _initialize(self, session: Session) -> None:
        settings = self._settings
        session.transport.read_until(settings.startup_prompt, own_line=False, timeout=settings.startup_timeout)
        script = "\n".join(
            [
                RESULT_TYPE_HELPER_SOURCE,
                f"SetPrompt({quote_string(settings.prompt)});",
                "SetColumns(0);",
                "SetAutoColumns(false);",
                "SetLineEditor(false);",
                f"print {quote_string(settings.sentinel)};",
            ]
        )
        session.transport.send(script)
        session.transport.read_until(
            settings.sentinel,
            line_prefix=(settings.prompt, settings.startup_prompt),
            timeout=settings.startup_timeout,
        )
