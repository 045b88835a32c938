from __future__ import annotations

import typer

from .commands import links_cmd, settings_cmd
from .logging_ import setup_logging


def _build_app() -> typer.Typer:
    app = typer.Typer(
        name="yourls",
        help="yourls CLI",
        no_args_is_help=True,
    )

    app.command("shorten")(links_cmd.shorten)
    app.command("expand")(links_cmd.expand)
    app.command("stats")(links_cmd.stats)
    app.add_typer(settings_cmd.app, name="settings")

    @app.callback()
    def _main(
            verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logs."),
    ):
        setup_logging(verbose)

    return app


app = _build_app()


def main() -> None:
    app()


if __name__ == "__main__":
    main()
