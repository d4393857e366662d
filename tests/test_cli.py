from __future__ import annotations

from pathlib import Path

import pytest
import typer
from conftest import PROMPT, SENTINEL, TransportFactoryRecorder
from typer.testing import CliRunner

from babel_magma import cli as cli_module
from babel_magma.config import Settings
from babel_magma.framework import BabelHost


class _StaticHttp:
    def __init__(self, body: str) -> None:
        self.body = body

    def get(self, url: str) -> str:
        return f"X: Y\n\n{self.body}"


@pytest.fixture
def app(monkeypatch: pytest.MonkeyPatch, transport_factory: TransportFactoryRecorder) -> typer.Typer:
    def build_host() -> BabelHost:
        settings = Settings(_env_file=None, sentinel=SENTINEL, prompt=PROMPT)
        return BabelHost(
            settings,
            transport_factory=transport_factory,
            http=_StaticHttp("<results><line>[ [ 1, 2 ], [ 3, 4 ] ]</line></results>"),
        )

    monkeypatch.setattr(cli_module, "BabelHost", build_host)
    monkeypatch.setattr(cli_module, "configure_logging", lambda **_kwargs: None)
    return cli_module.create_cli_app()


def test_cli_registers_builtin_commands(app: typer.Typer) -> None:
    names = {command.name for command in app.registered_commands}

    assert {"run", "hooks", "tangle-ext"}.issubset(names)


def test_run_reads_block_from_file(app: typer.Typer, tmp_path: Path) -> None:
    block = tmp_path / "block.m"
    block.write_text("print 1+1;", encoding="utf-8")

    result = CliRunner().invoke(app, ["run", str(block), "--result-type", "output"])

    assert result.exit_code == 0
    assert result.stdout.strip() == "2"


def test_run_reads_block_from_stdin_with_bindings(
    app: typer.Typer, transport_factory: TransportFactoryRecorder
) -> None:
    result = CliRunner().invoke(app, ["run", "--var", "xs=[1, 2, 3]", "--session", "cli"], input="xs;")

    assert result.exit_code == 0
    assert result.stdout.splitlines() == ["1", "2", "3"]
    assert transport_factory.spawned[0][2].closed


def test_run_remote_renders_table_rows(app: typer.Typer) -> None:
    result = CliRunner().invoke(app, ["run", "--language", "magma-remote"], input="Matrix(2, [1, 2, 3, 4]);")

    assert result.exit_code == 0
    assert result.stdout.splitlines() == ["1 | 2", "3 | 4"]


def test_run_reports_bad_parameters(app: typer.Typer) -> None:
    result = CliRunner().invoke(app, ["run", "--result-type", "table"], input="1;")

    assert result.exit_code == 1
    assert "unknown :result-type" in result.output


def test_tangle_ext_command(app: typer.Typer) -> None:
    runner = CliRunner()

    assert runner.invoke(app, ["tangle-ext", "magma"]).stdout.strip() == "m"
    assert runner.invoke(app, ["tangle-ext", "python"]).exit_code == 1


def test_hooks_command_lists_plugins(app: typer.Typer) -> None:
    result = CliRunner().invoke(app, ["hooks"])

    assert result.exit_code == 0
    assert "execute_src_block: builtin:magma" in result.stdout


def test_render_result() -> None:
    assert cli_module.render_result("2") == "2"
    assert cli_module.render_result([1, 2]) == "1\n2"
    assert cli_module.render_result([["a", 1], ["b", 2]]) == "a | 1\nb | 2"
