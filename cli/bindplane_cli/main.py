from __future__ import annotations

import typer

from .commands import config_cmd, rollout_cmd, settings_cmd, version_cmd
from .logging_ import setup_logging


def _build_app() -> typer.Typer:
    app = typer.Typer(
        name="bindplane",
        help="BindPlane control plane client",
        no_args_is_help=True,
    )

    app.add_typer(settings_cmd.app, name="settings")
    app.add_typer(config_cmd.app, name="config")
    app.add_typer(rollout_cmd.app, name="rollout")
    app.command("version")(version_cmd.version)

    @app.callback()
    def _main(
            verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logs."),
    ):
        setup_logging(verbose)

    return app


app = _build_app()
