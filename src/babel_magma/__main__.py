"""babel-magma CLI entry point."""

from __future__ import annotations

from babel_magma.cli import create_cli_app

app = create_cli_app()

if __name__ == "__main__":
    app()
