"""Copy the deployment bundle into the data root."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from rcstack_common import StackConfig
from rcstack_common.constants import COMPOSE_FILENAME, ENV_FILENAME, PROXY_TEMPLATE_FILENAME

from rcstack.errors import FilesystemError

log = logging.getLogger(__name__)


def bundle_files(cfg: StackConfig) -> list[tuple[Path, Path]]:
    """(source, destination) pairs for the files kept alongside the data."""
    return [
        (cfg.compose_file, cfg.data_dir / COMPOSE_FILENAME),
        (cfg.env_path, cfg.data_dir / ENV_FILENAME),
        (cfg.proxy_template_path, cfg.data_dir / PROXY_TEMPLATE_FILENAME),
    ]


def needs_sync(cfg: StackConfig) -> bool:
    return cfg.project_dir.resolve() != cfg.data_dir.resolve()


def sync_bundle(cfg: StackConfig) -> list[Path]:
    """Copy compose file, .env and template into DATA_DIR when run from elsewhere.

    Returns the destinations written (empty when project dir is the data root).
    """
    if not needs_sync(cfg):
        return []

    copied: list[Path] = []
    for src, dst in bundle_files(cfg):
        if not src.is_file():
            raise FilesystemError(f"Bundle file not found: {src}")
        try:
            dst.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(str(src), str(dst))
        except OSError as exc:
            raise FilesystemError(f"Could not copy {src} to {dst}: {exc}") from exc
        log.debug("Copied %s -> %s", src, dst)
        copied.append(dst)
    return copied
