"""Docker and Docker Compose subprocess wrappers."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path

from rcstack.errors import DockerError

log = logging.getLogger(__name__)


def _run(cmd: Sequence[str], *, check: bool = True, cwd: Path | None = None) -> subprocess.CompletedProcess[str]:
    log.debug("exec: %s", " ".join(cmd))
    try:
        return subprocess.run(
            list(cmd),
            check=check,
            capture_output=True,
            text=True,
            cwd=cwd,
        )
    except subprocess.CalledProcessError as exc:
        raise DockerError(
            f"Command failed: {' '.join(cmd)}\nstderr: {exc.stderr}"
        ) from exc
    except OSError as exc:
        raise DockerError(f"Could not execute {cmd[0]}: {exc}") from exc


def docker_version(docker: str = "docker") -> str:
    """First line of `docker --version`, or an empty string."""
    try:
        result = _run([docker, "--version"], check=False)
    except DockerError:
        return ""
    lines = result.stdout.strip().splitlines()
    return lines[0] if result.returncode == 0 and lines else ""


def compose_plugin_available(docker: str = "docker") -> bool:
    """True when `docker compose version` succeeds."""
    try:
        result = _run([docker, "compose", "version"], check=False)
    except DockerError:
        return False
    return result.returncode == 0


def validate_compose(compose_cmd: Sequence[str], compose_file: Path) -> bool:
    """Run `<compose> -f <file> config --quiet`. Returns False instead of raising."""
    try:
        result = _run(
            [*compose_cmd, "-f", str(compose_file), "config", "--quiet"],
            check=False,
            cwd=compose_file.parent,
        )
    except DockerError as exc:
        log.debug("Compose validation could not run: %s", exc)
        return False
    if result.returncode != 0:
        log.debug("Compose validation stderr: %s", result.stderr.strip())
    return result.returncode == 0
