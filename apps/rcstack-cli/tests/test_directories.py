"""Tests for data directory creation."""

from __future__ import annotations

from pathlib import Path

from rcstack_common import ArtifactState, StackConfig
from rcstack.services.directories import detect_directory_state, ensure_directories


class TestDirectories:
    def test_creates_all(self, tmp_config: StackConfig):
        assert detect_directory_state(tmp_config.data_directories) is ArtifactState.ABSENT
        created = ensure_directories(tmp_config.data_directories)
        assert created == tmp_config.data_directories
        assert all(d.is_dir() for d in tmp_config.data_directories)
        assert detect_directory_state(tmp_config.data_directories) is ArtifactState.CURRENT

    def test_second_run_is_noop(self, tmp_config: StackConfig):
        ensure_directories(tmp_config.data_directories)
        assert ensure_directories(tmp_config.data_directories) == []

    def test_partial_tree(self, tmp_config: StackConfig):
        tmp_config.uploads_dir.mkdir(parents=True)
        assert detect_directory_state(tmp_config.data_directories) is ArtifactState.STALE
        created = ensure_directories(tmp_config.data_directories)
        assert tmp_config.uploads_dir not in created
        assert len(created) == 3

    def test_existing_content_preserved(self, tmp_config: StackConfig):
        tmp_config.uploads_dir.mkdir(parents=True)
        marker = tmp_config.uploads_dir / "marker.txt"
        marker.write_text("keep me")
        ensure_directories(tmp_config.data_directories)
        assert marker.read_text() == "keep me"

    def test_empty_list(self, tmp_path: Path):
        assert detect_directory_state([]) is ArtifactState.ABSENT
        assert ensure_directories([]) == []
