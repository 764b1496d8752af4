"""Tests for NGINX config rendering and port-change detection."""

from __future__ import annotations

from pathlib import Path

import pytest

from rcstack_common import ArtifactState
from rcstack.errors import FilesystemError, TemplateError
from rcstack.services.proxy_config import (
    detect_proxy_config_state,
    ensure_proxy_config,
    read_rendered,
    read_rendered_port,
    render_proxy_config,
    substitute_port,
)

from conftest import TEMPLATE


@pytest.fixture
def template_path(tmp_path: Path) -> Path:
    path = tmp_path / "default.conf.template"
    path.write_text(TEMPLATE)
    return path


@pytest.fixture
def output_path(tmp_path: Path) -> Path:
    return tmp_path / "proxy" / "default.conf"


class TestSubstitution:
    def test_replaces_every_token(self):
        rendered = substitute_port(TEMPLATE, 60443)
        assert "__HTTPS_PORT__" not in rendered
        assert rendered.count("60443") == 2
        assert "return 301 https://$host:60443$request_uri;" in rendered

    def test_read_rendered_port(self):
        assert read_rendered_port(TEMPLATE, substitute_port(TEMPLATE, 8443)) == 8443

    def test_read_rendered_port_unrecognised(self):
        assert read_rendered_port(TEMPLATE, "server { listen 80; }\n") is None

    def test_read_rendered_port_uses_later_line_when_first_edited(self):
        rendered = substitute_port(TEMPLATE, 8443).replace("return 301", "return 302")
        assert read_rendered_port(TEMPLATE, rendered) == 8443


class TestRenderProxyConfig:
    def test_absent_output_renders(self, template_path: Path, output_path: Path):
        assert render_proxy_config(60443, template_path, output_path, previous_port=None) is True
        assert output_path.read_text() == substitute_port(TEMPLATE, 60443)

    def test_same_port_skips(self, template_path: Path, output_path: Path):
        render_proxy_config(60443, template_path, output_path, None)
        assert render_proxy_config(60443, template_path, output_path, previous_port=60443) is False

    def test_different_port_rerenders(self, template_path: Path, output_path: Path):
        render_proxy_config(60443, template_path, output_path, None)
        assert render_proxy_config(8443, template_path, output_path, previous_port=60443) is True
        assert "8443" in output_path.read_text()

    def test_absent_output_renders_even_with_matching_previous_port(self, template_path: Path, output_path: Path):
        assert render_proxy_config(60443, template_path, output_path, previous_port=60443) is True

    def test_missing_template(self, tmp_path: Path, output_path: Path):
        with pytest.raises(TemplateError, match="template not found"):
            render_proxy_config(60443, tmp_path / "missing.template", output_path, None)
        assert not output_path.exists()


class TestEnsureProxyConfig:
    def test_port_change_then_stable(self, template_path: Path, output_path: Path):
        assert ensure_proxy_config(60443, template_path, output_path) is True
        assert detect_proxy_config_state(TEMPLATE, output_path, 60443) is ArtifactState.CURRENT

        assert detect_proxy_config_state(TEMPLATE, output_path, 8443) is ArtifactState.STALE
        assert ensure_proxy_config(8443, template_path, output_path) is True
        content = output_path.read_bytes()
        assert b"8443" in content
        assert b"60443" not in content

        assert ensure_proxy_config(8443, template_path, output_path) is False
        assert output_path.read_bytes() == content

    def test_unrecognised_output_is_rerendered(self, template_path: Path, output_path: Path):
        output_path.parent.mkdir(parents=True)
        output_path.write_text("# hand written\n")
        assert detect_proxy_config_state(TEMPLATE, output_path, 60443) is ArtifactState.STALE
        assert ensure_proxy_config(60443, template_path, output_path) is True
        assert output_path.read_text() == substitute_port(TEMPLATE, 60443)

    def test_unrelated_edit_is_preserved(self, template_path: Path, output_path: Path):
        ensure_proxy_config(60443, template_path, output_path)
        edited = output_path.read_text() + "# operator note\n"
        output_path.write_text(edited)
        assert ensure_proxy_config(60443, template_path, output_path) is False
        assert output_path.read_text() == edited

    def test_force(self, template_path: Path, output_path: Path):
        ensure_proxy_config(60443, template_path, output_path)
        assert ensure_proxy_config(60443, template_path, output_path, force=True) is True

    def test_template_without_token(self, tmp_path: Path, output_path: Path):
        template_path = tmp_path / "static.template"
        template_path.write_text("server { listen 443 ssl; }\n")
        assert ensure_proxy_config(60443, template_path, output_path) is True
        assert ensure_proxy_config(60443, template_path, output_path) is False

    def test_absent(self, output_path: Path):
        assert detect_proxy_config_state(TEMPLATE, output_path, 60443) is ArtifactState.ABSENT


class TestNonUtf8Input:
    def test_template_bytes_pass_through(self, tmp_path: Path, output_path: Path):
        template_path = tmp_path / "latin1.template"
        template_path.write_bytes(TEMPLATE.encode() + b"# caf\xe9\n")

        assert ensure_proxy_config(60443, template_path, output_path) is True
        assert output_path.read_bytes() == substitute_port(TEMPLATE, 60443).encode() + b"# caf\xe9\n"
        assert ensure_proxy_config(60443, template_path, output_path) is False

    def test_rendered_config_with_foreign_bytes(self, template_path: Path, output_path: Path):
        output_path.parent.mkdir(parents=True)
        edited = substitute_port(TEMPLATE, 60443).encode() + b"# caf\xe9\n"
        output_path.write_bytes(edited)

        assert detect_proxy_config_state(TEMPLATE, output_path, 60443) is ArtifactState.CURRENT
        assert ensure_proxy_config(60443, template_path, output_path) is False
        assert output_path.read_bytes() == edited

        assert ensure_proxy_config(8443, template_path, output_path) is True
        assert b"8443" in output_path.read_bytes()

    def test_unreadable_rendered_config(self, template_path: Path, output_path: Path):
        output_path.mkdir(parents=True)
        assert detect_proxy_config_state(TEMPLATE, output_path, 60443) is ArtifactState.ABSENT
        with pytest.raises(FilesystemError):
            read_rendered(output_path)
