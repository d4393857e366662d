"""Builtin Magma language hooks."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from loguru import logger

from babel_magma.executor import SessionExecutor
from babel_magma.expand import expand_body
from babel_magma.hookspecs import hookimpl
from babel_magma.params import DEFAULT_HEADER_ARGS, build_request
from babel_magma.remote import RemoteExecutor
from babel_magma.session import SessionManager
from babel_magma.types import Params

if TYPE_CHECKING:
    from babel_magma.framework import BabelHost

SESSION_LANGUAGE = "magma"
REMOTE_LANGUAGE = "magma-remote"
TANGLE_EXTENSIONS = {SESSION_LANGUAGE: "m", REMOTE_LANGUAGE: "m"}


def execute_magma(body: str, params: Params, *, manager: SessionManager, executor: SessionExecutor) -> Any:
    """Evaluate a block in the named interactive session."""

    request = build_request(body, params)
    expanded = expand_body(request.body, request.bindings, isolate=request.isolate)
    session = manager.ensure_session(request.session)
    logger.info("magma.execute buffer={} result_type={}", session.buffer_name, request.result_type)
    return executor.execute(session, expanded, request.result_type)


def execute_magma_remote(body: str, params: Params, *, executor: RemoteExecutor) -> Any:
    """Evaluate a block with the online calculator."""

    request = build_request(body, params)
    expanded = expand_body(request.body, request.bindings, isolate=request.isolate)
    return executor.execute(expanded, request.result_type)


class MagmaPlugin:
    @hookimpl
    def execute_src_block(self, language: str, body: str, params: Params, host: BabelHost) -> Any | None:
        if language == SESSION_LANGUAGE:
            manager = SessionManager(host.sessions, host.settings, transport_factory=host.transport_factory)
            return execute_magma(body, params, manager=manager, executor=SessionExecutor(host.settings))
        if language == REMOTE_LANGUAGE:
            return execute_magma_remote(body, params, executor=RemoteExecutor(host.settings, transport=host.http))
        return None

    @hookimpl
    def default_header_args(self, language: str) -> Params | None:
        if language in TANGLE_EXTENSIONS:
            return dict(DEFAULT_HEADER_ARGS)
        return None

    @hookimpl
    def tangle_extension(self, language: str) -> str | None:
        return TANGLE_EXTENSIONS.get(language)


plugin = MagmaPlugin()
