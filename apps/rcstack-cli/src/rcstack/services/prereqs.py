"""Resolve the external tools the stack depends on."""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable
from dataclasses import dataclass
from typing import Optional

from rcstack.errors import PrerequisiteError
from rcstack.services import docker

log = logging.getLogger(__name__)

DOCKER = "docker"
COMPOSE_STANDALONE = "docker-compose"
OPENSSL = "openssl"

Which = Callable[[str], Optional[str]]


@dataclass(frozen=True)
class Toolchain:
    """Resolved external commands."""

    docker: str
    compose: tuple[str, ...]
    openssl: str
    docker_version: str = ""

    @property
    def compose_display(self) -> str:
        return " ".join(self.compose)


def resolve_compose(
    docker_path: str | None,
    *,
    which: Which = shutil.which,
    plugin_check: Callable[[str], bool] = docker.compose_plugin_available,
) -> tuple[str, ...] | None:
    """Find the orchestration CLI in either accepted form.

    The standalone ``docker-compose`` binary (installed by the Unraid Compose
    Manager plugin) is preferred over the ``docker compose`` plugin.
    """
    standalone = which(COMPOSE_STANDALONE)
    if standalone:
        return (standalone,)
    if docker_path and plugin_check(docker_path):
        return (docker_path, "compose")
    return None


def check_prerequisites(
    *,
    which: Which = shutil.which,
    plugin_check: Callable[[str], bool] = docker.compose_plugin_available,
    version_probe: Callable[[str], str] = docker.docker_version,
) -> Toolchain:
    """Resolve docker, compose and openssl; raise one error listing all misses."""
    missing: list[str] = []

    docker_path = which(DOCKER)
    if not docker_path:
        missing.append(DOCKER)

    compose = resolve_compose(docker_path, which=which, plugin_check=plugin_check)
    if compose is None:
        missing.append(f"{COMPOSE_STANDALONE} (or '{DOCKER} compose')")

    openssl_path = which(OPENSSL)
    if not openssl_path:
        missing.append(OPENSSL)

    if missing:
        raise PrerequisiteError(missing)

    toolchain = Toolchain(
        docker=docker_path,
        compose=compose,
        openssl=openssl_path,
        docker_version=version_probe(docker_path),
    )
    log.debug("Resolved toolchain: %s", toolchain)
    return toolchain
