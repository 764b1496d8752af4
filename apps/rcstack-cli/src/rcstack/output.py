"""Console status lines shared by all commands."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

console = Console(highlight=False)


def info(message: str) -> None:
    console.print(f"[cyan]\\[INFO][/cyan]  {escape(message)}")


def ok(message: str) -> None:
    console.print(f"[green]\\[ OK ][/green]  {escape(message)}")


def warn(message: str) -> None:
    console.print(f"[yellow bold]\\[WARN][/yellow bold]  {escape(message)}")


def fail(message: str) -> None:
    console.print(f"[red]\\[FAIL][/red]  {escape(message)}")


def step(index: int, total: int, title: str) -> None:
    console.print(f"[bold]\\[{index}/{total}][/bold] {escape(title)}")


def configure_logging(verbose: bool) -> None:
    """Route stdlib logging through Rich; DEBUG when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_path=verbose)],
        force=True,
    )
