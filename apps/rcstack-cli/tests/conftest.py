"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from rcstack_common import StackConfig

TEMPLATE = (
    "server {\n"
    "    listen 80;\n"
    "    return 301 https://$host:__HTTPS_PORT__$request_uri;\n"
    "}\n"
    "server {\n"
    "    listen 443 ssl;\n"
    "    proxy_set_header X-Forwarded-Port __HTTPS_PORT__;\n"
    "}\n"
)

COMPOSE = "services:\n  nginx:\n    image: nginx:1.27-alpine\n"


def write_env(project_dir: Path, **values: str) -> Path:
    env_path = project_dir / ".env"
    env_path.write_text("".join(f"{key}={value}\n" for key, value in values.items()))
    return env_path


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A project directory with .env, compose file and proxy template."""
    project = tmp_path / "project"
    project.mkdir()
    write_env(
        project,
        DATA_DIR=str(tmp_path / "data"),
        NGINX_HOST="192.168.1.50",
        ROOT_URL="http://192.168.1.50:60080",
        NGINX_HTTPS_PORT="60443",
    )
    (project / "docker-compose.yml").write_text(COMPOSE)
    (project / "default.conf.template").write_text(TEMPLATE)
    return project


@pytest.fixture
def tmp_config(tmp_path: Path, project_dir: Path) -> StackConfig:
    """Return a StackConfig pointing at temp directories."""
    return StackConfig(
        project_dir=project_dir,
        data_dir=tmp_path / "data",
        nginx_host="192.168.1.50",
    )
