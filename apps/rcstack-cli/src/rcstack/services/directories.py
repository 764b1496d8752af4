"""Data directory tree creation."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from rcstack_common import ArtifactState

from rcstack.errors import FilesystemError

log = logging.getLogger(__name__)


def detect_directory_state(paths: Iterable[Path]) -> ArtifactState:
    """ABSENT if none exist, CURRENT if all exist, STALE if only some do."""
    present = [p.is_dir() for p in paths]
    if present and all(present):
        return ArtifactState.CURRENT
    if any(present):
        return ArtifactState.STALE
    return ArtifactState.ABSENT


def ensure_directories(paths: Iterable[Path]) -> list[Path]:
    """Create any missing directories (with parents). Returns the ones created.

    Existing directories and their contents are left untouched.
    """
    created: list[Path] = []
    for d in paths:
        if d.is_dir():
            continue
        try:
            d.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise FilesystemError(f"Could not create directory {d}: {exc}") from exc
        log.debug("Created %s", d)
        created.append(d)
    return created
