"""Permission normalisation for the shared data tree.

Containers in the stack run under assorted UIDs (MongoDB, Rocket.Chat,
NGINX) that rarely match the Unraid host user, so the default mode opens
the tree to everyone. ``strict`` mode limits access to owner and group and
can chown to a configured PUID/PGID instead.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from rcstack_common import PermissionMode

from rcstack.errors import FilesystemError

log = logging.getLogger(__name__)

_MODES = {
    PermissionMode.PERMISSIVE: (0o777, 0o666),
    PermissionMode.STRICT: (0o775, 0o664),
}

# Private keys stay owner-only in strict mode
_STRICT_KEY_MODE = 0o600
_KEY_SUFFIX = ".key"


def _walk(root: Path) -> Iterable[tuple[Path, bool]]:
    if root.is_symlink():
        log.warning("Skipping %s: symlinked roots are not followed", root)
        return
    if not root.exists():
        return
    yield root, root.is_dir()
    if not root.is_dir():
        return
    for dirpath, dirnames, filenames in os.walk(root):
        base = Path(dirpath)
        for name in dirnames:
            yield base / name, True
        for name in filenames:
            yield base / name, False


def _mode_for(path: Path, is_dir: bool, mode: PermissionMode, dir_mode: int, file_mode: int) -> int:
    if is_dir:
        return dir_mode
    if mode is PermissionMode.STRICT and path.suffix == _KEY_SUFFIX:
        return _STRICT_KEY_MODE
    return file_mode


def normalize_permissions(
    paths: Iterable[Path],
    *,
    mode: PermissionMode = PermissionMode.PERMISSIVE,
    uid: int | None = None,
    gid: int | None = None,
) -> int:
    """Apply directory/file modes recursively. Returns the number of entries touched.

    Ownership is only changed in strict mode and only for the ids given.
    Symlinks, including symlinked roots, are never followed.
    """
    dir_mode, file_mode = _MODES[mode]
    chown = mode is PermissionMode.STRICT and (uid is not None or gid is not None)
    seen: set[Path] = set()
    touched = 0

    for root in paths:
        for path, is_dir in _walk(root):
            if path in seen or path.is_symlink():
                continue
            seen.add(path)
            try:
                if chown:
                    os.chown(path, -1 if uid is None else uid, -1 if gid is None else gid)
                path.chmod(_mode_for(path, is_dir, mode, dir_mode, file_mode))
            except OSError as exc:
                raise FilesystemError(f"Could not set permissions on {path}: {exc}") from exc
            touched += 1

    log.debug("Normalised %d entries (%s)", touched, mode.value)
    return touched
