"""Central configuration for rcstack tools."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from rcstack_common.constants import (
    AUDIT_LOG_RELPATH,
    CERT_FILENAME,
    CERTS_DIR,
    COMPOSE_FILENAME,
    DATABASE_DIR,
    DEFAULT_DATA_DIR,
    DEFAULT_NGINX_HOST,
    DEFAULT_NGINX_HTTP_PORT,
    DEFAULT_NGINX_HTTPS_PORT,
    DEFAULT_RC_HOST_PORT,
    ENV_FILENAME,
    KEY_FILENAME,
    PROXY_CONF_FILENAME,
    PROXY_DIR,
    PROXY_TEMPLATE_FILENAME,
    UPLOADS_DIR,
)


class PermissionMode(str, Enum):
    """How the data tree is opened up for the containers."""

    PERMISSIVE = "permissive"
    STRICT = "strict"


class StackConfig(BaseModel):
    """Validated configuration snapshot for one provisioning run.

    Field aliases are the ``.env`` variable names, so a raw dotenv mapping
    can be validated directly. Instances are frozen.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    project_dir: Path
    env_file: Path | None = None
    data_dir: Path = Field(default=DEFAULT_DATA_DIR, alias="DATA_DIR")
    nginx_host: str = Field(default=DEFAULT_NGINX_HOST, alias="NGINX_HOST")
    nginx_https_port: int = Field(default=DEFAULT_NGINX_HTTPS_PORT, alias="NGINX_HTTPS_PORT", ge=1, le=65535)
    nginx_http_port: int = Field(default=DEFAULT_NGINX_HTTP_PORT, alias="NGINX_HTTP_PORT", ge=1, le=65535)
    rc_host_port: int = Field(default=DEFAULT_RC_HOST_PORT, alias="RC_HOST_PORT", ge=1, le=65535)
    root_url: str | None = Field(default=None, alias="ROOT_URL")
    permissions: PermissionMode = Field(default=PermissionMode.PERMISSIVE, alias="PERMISSIONS")
    puid: int | None = Field(default=None, alias="PUID", ge=0)
    pgid: int | None = Field(default=None, alias="PGID", ge=0)

    @field_validator("data_dir")
    @classmethod
    def _resolve_data_dir(cls, value: Path, info: ValidationInfo) -> Path:
        project_dir = info.data.get("project_dir")
        if not value.is_absolute() and project_dir is not None:
            return project_dir / value
        return value

    @field_validator("permissions", mode="before")
    @classmethod
    def _lower_permissions(cls, value: object) -> object:
        return value.strip().lower() if isinstance(value, str) else value

    @property
    def effective_root_url(self) -> str:
        return self.root_url or f"http://{self.nginx_host}:{self.nginx_http_port}"

    # Project (bundle) files

    @property
    def env_path(self) -> Path:
        return self.env_file or self.project_dir / ENV_FILENAME

    @property
    def compose_file(self) -> Path:
        return self.project_dir / COMPOSE_FILENAME

    @property
    def proxy_template_path(self) -> Path:
        return self.project_dir / PROXY_TEMPLATE_FILENAME

    @property
    def audit_log_path(self) -> Path:
        return self.project_dir / AUDIT_LOG_RELPATH

    # Data tree

    @property
    def database_dir(self) -> Path:
        return self.data_dir / DATABASE_DIR

    @property
    def uploads_dir(self) -> Path:
        return self.data_dir / UPLOADS_DIR

    @property
    def proxy_dir(self) -> Path:
        return self.data_dir / PROXY_DIR

    @property
    def certs_dir(self) -> Path:
        return self.data_dir / CERTS_DIR

    @property
    def cert_path(self) -> Path:
        return self.certs_dir / CERT_FILENAME

    @property
    def key_path(self) -> Path:
        return self.certs_dir / KEY_FILENAME

    @property
    def proxy_conf_path(self) -> Path:
        return self.proxy_dir / PROXY_CONF_FILENAME

    @property
    def data_directories(self) -> list[Path]:
        """Directories that must exist before anything else is written."""
        return [self.database_dir, self.uploads_dir, self.proxy_dir, self.certs_dir]
