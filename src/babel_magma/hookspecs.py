"""Pluggy hook namespace and host hook specifications."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pluggy

from babel_magma.types import Params

if TYPE_CHECKING:
    from babel_magma.framework import BabelHost

BABEL_HOOK_NAMESPACE = "babel"
hookspec = pluggy.HookspecMarker(BABEL_HOOK_NAMESPACE)
hookimpl = pluggy.HookimplMarker(BABEL_HOOK_NAMESPACE)


class BabelHookSpecs:
    """Hook contract for source block language plugins."""

    @hookspec(firstresult=True)
    def execute_src_block(self, language: str, body: str, params: Params, host: BabelHost) -> Any | None:
        """Evaluate one source block and return its result value."""

    @hookspec(firstresult=True)
    def default_header_args(self, language: str) -> Params | None:
        """Provide default header arguments for blocks of one language."""

    @hookspec(firstresult=True)
    def tangle_extension(self, language: str) -> str | None:
        """Return the file suffix used when blocks are tangled to files."""

    @hookspec
    def register_cli_commands(self, app: Any) -> None:
        """Register CLI commands onto the root Typer application."""

    @hookspec
    def on_error(self, stage: str, error: Exception, language: str | None) -> None:
        """Observe errors raised while evaluating blocks."""
