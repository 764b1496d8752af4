"""Show the provisioning state of the stack."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from rcstack_common import ArtifactState, StackConfig

from rcstack import output
from rcstack.config import load_config
from rcstack.errors import SetupError
from rcstack.output import console
from rcstack.services import directories, proxy_config, tls

_STATE_STYLE = {
    ArtifactState.CURRENT: "green",
    ArtifactState.STALE: "yellow",
    ArtifactState.ABSENT: "red",
}


def _state_cell(state: ArtifactState) -> str:
    style = _STATE_STYLE[state]
    return f"[{style}]{state.value}[/{style}]"


def _proxy_state_cell(cfg: StackConfig) -> str:
    """State of the rendered config; unknown when the template cannot be read."""
    try:
        template_text = proxy_config.read_template(cfg.proxy_template_path)
        state = proxy_config.detect_proxy_config_state(template_text, cfg.proxy_conf_path, cfg.nginx_https_port)
    except SetupError as exc:
        output.warn(str(exc))
        return "[yellow]unknown[/yellow]"
    return _state_cell(state)


def status(
    project_dir: Path = typer.Option(Path("."), "--project-dir", "-C", help="Directory holding .env and the bundle files"),
    env_file: Optional[Path] = typer.Option(None, "--env-file", help="Explicit .env path"),
) -> None:
    """Show artifact states and certificate details."""
    try:
        cfg = load_config(project_dir, env_file)
    except SetupError as exc:
        output.fail(str(exc))
        raise typer.Exit(exc.exit_code)

    table = Table(title="Rocket.Chat Stack")
    table.add_column("Artifact", style="cyan")
    table.add_column("State")
    table.add_column("Path")
    table.add_row("Data directories", _state_cell(directories.detect_directory_state(cfg.data_directories)), str(cfg.data_dir))
    table.add_row("TLS key pair", _state_cell(tls.detect_tls_state(cfg.cert_path, cfg.key_path)), str(cfg.certs_dir))
    table.add_row("Nginx config", _proxy_state_cell(cfg), str(cfg.proxy_conf_path))
    console.print(table)

    if not cfg.cert_path.is_file():
        return

    try:
        info = tls.read_certificate_info(cfg.cert_path)
    except SetupError as exc:
        output.warn(str(exc))
        return

    cert_table = Table(title="Certificate")
    cert_table.add_column("Field", style="cyan")
    cert_table.add_column("Value", style="yellow")
    cert_table.add_row("Subject", info.subject)
    cert_table.add_row("Issuer", "self-signed" if info.self_signed else info.issuer)
    cert_table.add_row("SANs", ", ".join(info.subject_alt_names) or "-")
    cert_table.add_row("Expires", info.not_valid_after.isoformat())
    cert_table.add_row("Days remaining", str(info.days_remaining))
    console.print(cert_table)
