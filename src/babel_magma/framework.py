"""Host integration layer: plugin manager, session registry and dispatch."""

from __future__ import annotations

from typing import Any

import pluggy
from loguru import logger

from babel_magma.config import Settings, get_settings
from babel_magma.errors import ConfigurationError
from babel_magma.hook_runtime import HookRuntime
from babel_magma.hookspecs import BABEL_HOOK_NAMESPACE, BabelHookSpecs
from babel_magma.remote import HttpGetter
from babel_magma.session import SessionRegistry, TransportFactory
from babel_magma.types import Params

PLUGIN_ENTRY_POINT_GROUP = "babel_magma"


class BabelHost:
    """Minimal block-evaluation host. Language support grows from plugins."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        transport_factory: TransportFactory | None = None,
        http: HttpGetter | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.sessions = SessionRegistry()
        self.transport_factory = transport_factory
        self.http = http
        self._plugin_manager = pluggy.PluginManager(BABEL_HOOK_NAMESPACE)
        self._plugin_manager.add_hookspecs(BabelHookSpecs)
        self._hook_runtime = HookRuntime(self._plugin_manager)

    def register(self, plugin: object, name: str | None = None) -> None:
        self._plugin_manager.register(plugin, name=name)

    def load_plugins(self) -> None:
        """Register the builtin plugins and any installed entry point plugins."""

        from babel_magma.cli import plugin as cli_plugin
        from babel_magma.plugin import plugin as magma_plugin

        for name, builtin in (("builtin:magma", magma_plugin), ("builtin:cli", cli_plugin)):
            if not self._plugin_manager.is_registered(builtin):
                self.register(builtin, name=name)
        loaded = self._plugin_manager.load_setuptools_entrypoints(PLUGIN_ENTRY_POINT_GROUP)
        if loaded:
            logger.info("plugins.loaded count={} group={}", loaded, PLUGIN_ENTRY_POINT_GROUP)

    def execute(self, language: str, body: str, params: Params | None = None) -> Any:
        """Evaluate one source block and return its result value."""

        defaults = self._hook_runtime.call_first("default_header_args", language=language) or {}
        merged = {**defaults, **(params or {})}
        result = self._hook_runtime.call_first(
            "execute_src_block",
            language=language,
            body=body,
            params=merged,
            host=self,
        )
        if result is None:
            error = ConfigurationError(f"no plugin evaluates {language!r} blocks")
            self._hook_runtime.notify_error(stage="execute", error=error, language=language)
            raise error
        return result

    def tangle_extension(self, language: str) -> str | None:
        return self._hook_runtime.call_first("tangle_extension", language=language)

    def register_cli_commands(self, app: Any) -> None:
        """Ask plugins to register CLI commands."""

        self._hook_runtime.call_many("register_cli_commands", app=app)

    def hook_report(self) -> dict[str, list[str]]:
        """Return hook implementation summary for diagnostics."""

        return self._hook_runtime.hook_report()

    def close(self) -> None:
        """Terminate every session process at host shutdown."""

        self.sessions.close_all()
