"""Scaffold a starter deployment bundle."""

from __future__ import annotations

from pathlib import Path

import typer

from rcstack_common import DEFAULT_DATA_DIR

from rcstack import output
from rcstack.services import bundle_renderer


def init(
    target: Path = typer.Argument(Path("."), help="Directory to write the bundle into"),
    data_dir: Path = typer.Option(DEFAULT_DATA_DIR, "--data-dir", help="DATA_DIR written into .env"),
    force: bool = typer.Option(False, "--force", help="Overwrite existing bundle files"),
) -> None:
    """Write .env, docker-compose.yml and default.conf.template."""
    results = bundle_renderer.write_bundle(target, data_dir=data_dir, force=force)
    for path, written in results.items():
        if written:
            output.ok(f"Wrote {path}")
        else:
            output.info(f"Kept existing {path} (use --force to overwrite)")

    output.console.print()
    output.console.print("  Next: edit .env, then run:", markup=False)
    output.console.print(f"    rcstack setup --project-dir {target}", markup=False)
