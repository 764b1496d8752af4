"""Tests for shared Pydantic models."""

from __future__ import annotations

import json
from datetime import datetime

from rcstack_common import ArtifactState, SetupEvent


class TestSetupEvent:
    def test_defaults(self):
        event = SetupEvent(action="setup", target="/mnt/user/appdata/unraid-rocket.chat")
        assert event.result == "success"
        assert event.error is None
        assert isinstance(event.timestamp, datetime)

    def test_to_jsonl(self):
        event = SetupEvent(
            action="setup",
            target="/data",
            actor="root",
            params={"cert_generated": True},
        )
        data = json.loads(event.to_jsonl())
        assert data["action"] == "setup"
        assert data["params"]["cert_generated"] is True


class TestArtifactState:
    def test_needs_action(self):
        assert ArtifactState.ABSENT.needs_action
        assert ArtifactState.STALE.needs_action
        assert not ArtifactState.CURRENT.needs_action

    def test_values(self):
        assert [s.value for s in ArtifactState] == ["absent", "current", "stale"]
