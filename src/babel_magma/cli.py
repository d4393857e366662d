"""Builtin CLI command hooks and application bootstrap."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import typer

from babel_magma.errors import BabelMagmaError
from babel_magma.framework import BabelHost
from babel_magma.hookspecs import hookimpl
from babel_magma.logging_utils import configure_logging


class CliCorePlugin:
    @hookimpl
    def register_cli_commands(self, app: typer.Typer) -> None:
        @app.command("run")
        def run(
            source: Path | None = typer.Argument(  # noqa: B008
                None, help="File holding the block body, stdin when omitted"
            ),
            language: str = typer.Option("magma", "--language", "-l", help="Block language"),
            session: str | None = typer.Option(None, "--session", "-s", help="Session name, 'none' for the default"),
            var: list[str] | None = typer.Option(None, "--var", help="Binding as name=value, repeatable"),  # noqa: B008
            result_type: str = typer.Option("value", "--result-type", "-r", help="output, value or eval"),
            magma_eval: bool = typer.Option(False, "--magma-eval", help="Evaluate without touching session state"),
        ) -> None:
            """Evaluate one source block and print its result."""

            body = source.read_text(encoding="utf-8") if source is not None else sys.stdin.read()
            params: dict[str, Any] = {":result-type": result_type, ":magma-eval": magma_eval}
            if session is not None:
                params[":session"] = session
            if var:
                params[":var"] = list(var)

            host = _load_host()
            try:
                result = host.execute(language, body, params)
            except BabelMagmaError as exc:
                typer.echo(f"error: {exc}", err=True)
                raise typer.Exit(code=1) from exc
            finally:
                host.close()
            typer.echo(render_result(result))

        @app.command("hooks")
        def list_hooks() -> None:
            """Show hook implementation mapping."""

            report = _load_host().hook_report()
            if not report:
                typer.echo("(no hook implementations)")
                return
            for hook_name, plugins in report.items():
                typer.echo(f"{hook_name}: {', '.join(plugins)}")

        @app.command("tangle-ext")
        def tangle_ext(language: str = typer.Argument(..., help="Block language")) -> None:
            """Print the file suffix used when tangling blocks of a language."""

            extension = _load_host().tangle_extension(language)
            if extension is None:
                typer.echo(f"no tangle extension for {language!r}", err=True)
                raise typer.Exit(code=1)
            typer.echo(extension)


plugin = CliCorePlugin()


def render_result(value: Any) -> str:
    """Render a result for the terminal: rows of a table on separate lines."""

    if isinstance(value, list):
        return "\n".join(_render_row(item) for item in value)
    return str(value)


def _render_row(item: Any) -> str:
    if isinstance(item, list):
        return " | ".join(_render_row(cell) for cell in item)
    return str(item)


def _load_host() -> BabelHost:
    host = BabelHost()
    configure_logging(level=host.settings.log_level)
    host.load_plugins()
    return host


def create_cli_app() -> typer.Typer:
    app = typer.Typer(name="babel-magma", help="Evaluate Magma source blocks", add_completion=False)
    _load_host().register_cli_commands(app)
    return app
