"""Tests for bundle scaffolding and syncing."""

from __future__ import annotations

from pathlib import Path

import pytest

from rcstack_common import StackConfig
from rcstack.config import read_env_file
from rcstack.errors import FilesystemError
from rcstack.services import bundle, bundle_renderer
from rcstack.services.proxy_config import read_rendered_port, substitute_port


class TestBundleRenderer:
    def test_writes_all_files(self, tmp_path: Path):
        results = bundle_renderer.write_bundle(tmp_path / "stack")
        assert set(p.name for p in results) == {".env", "docker-compose.yml", "default.conf.template"}
        assert all(results.values())

    def test_env_has_placeholder_and_defaults(self, tmp_path: Path):
        bundle_renderer.write_bundle(tmp_path, data_dir=Path("/srv/rc"))
        env = read_env_file(tmp_path / ".env")
        assert env["NGINX_HOST"] == "YOUR_UNRAID_IP"
        assert env["ROOT_URL"] == "http://YOUR_UNRAID_IP:60080"
        assert env["DATA_DIR"] == "/srv/rc"
        assert env["NGINX_HTTPS_PORT"] == "60443"

    def test_proxy_template_carries_token(self, tmp_path: Path):
        bundle_renderer.write_bundle(tmp_path)
        template = (tmp_path / "default.conf.template").read_text()
        assert "__HTTPS_PORT__" in template
        assert "ssl_certificate     /etc/nginx/certs/rocketchat.crt;" in template
        assert read_rendered_port(template, substitute_port(template, 8443)) == 8443

    def test_compose_mounts_data_tree(self, tmp_path: Path):
        bundle_renderer.write_bundle(tmp_path)
        compose = (tmp_path / "docker-compose.yml").read_text()
        for mount in (
            "${DATA_DIR}/database:/data/db",
            "${DATA_DIR}/uploads:/app/uploads",
            "${DATA_DIR}/proxy/default.conf:/etc/nginx/conf.d/default.conf:ro",
            "${DATA_DIR}/proxy/certs:/etc/nginx/certs:ro",
        ):
            assert mount in compose
        assert '"${NGINX_HTTPS_PORT:-60443}:443"' in compose

    def test_existing_files_kept(self, tmp_path: Path):
        env = tmp_path / ".env"
        env.write_text("NGINX_HOST=10.0.0.2\n")
        results = bundle_renderer.write_bundle(tmp_path)
        assert results[env] is False
        assert env.read_text() == "NGINX_HOST=10.0.0.2\n"

    def test_force_overwrites(self, tmp_path: Path):
        env = tmp_path / ".env"
        env.write_text("NGINX_HOST=10.0.0.2\n")
        results = bundle_renderer.write_bundle(tmp_path, force=True)
        assert results[env] is True
        assert "YOUR_UNRAID_IP" in env.read_text()


class TestSyncBundle:
    def test_copies_when_dirs_differ(self, tmp_config: StackConfig):
        copied = bundle.sync_bundle(tmp_config)
        assert [p.name for p in copied] == ["docker-compose.yml", ".env", "default.conf.template"]
        for src, dst in bundle.bundle_files(tmp_config):
            assert dst.read_bytes() == src.read_bytes()

    def test_noop_when_project_is_data_dir(self, project_dir: Path):
        cfg = StackConfig(project_dir=project_dir, data_dir=project_dir)
        assert bundle.needs_sync(cfg) is False
        assert bundle.sync_bundle(cfg) == []

    def test_missing_compose_file(self, tmp_config: StackConfig):
        tmp_config.compose_file.unlink()
        with pytest.raises(FilesystemError, match="docker-compose.yml"):
            bundle.sync_bundle(tmp_config)
