"""Shared Pydantic models."""

from rcstack_common.models.artifact import ArtifactState
from rcstack_common.models.setup_event import SetupEvent

__all__ = ["ArtifactState", "SetupEvent"]
