"""Root Typer application for the rcstack CLI."""

from __future__ import annotations

import typer

from rcstack.commands import init, setup, status
from rcstack.output import configure_logging

app = typer.Typer(
    name="rcstack",
    help="Rocket.Chat Unraid stack: bootstrap directories, TLS and the Nginx proxy config.",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging(verbose)


app.command(name="setup")(setup.setup)
app.command(name="init")(init.init)
app.command(name="status")(status.status)

if __name__ == "__main__":
    app()
