"""Detected state of a provisioned artifact."""

from __future__ import annotations

from enum import Enum


class ArtifactState(str, Enum):
    """Tri-state result of inspecting an artifact on disk."""

    ABSENT = "absent"
    CURRENT = "current"
    STALE = "stale"

    @property
    def needs_action(self) -> bool:
        return self is not ArtifactState.CURRENT
