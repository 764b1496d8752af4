"""Render the NGINX config from default.conf.template.

The template carries a single token, ``__HTTPS_PORT__``, that is replaced
verbatim with the configured external HTTPS port. The rendered file is
rewritten only when it is missing or encodes a different port.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from rcstack_common import HTTPS_PORT_TOKEN, ArtifactState

from rcstack.errors import FilesystemError, TemplateError

log = logging.getLogger(__name__)

# Undecodable bytes round-trip unchanged, like sed
_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


def read_template(template_path: Path) -> str:
    if not template_path.is_file():
        raise TemplateError(f"Nginx template not found at {template_path}")
    try:
        return template_path.read_text(encoding=_ENCODING, errors=_ERRORS)
    except OSError as exc:
        raise TemplateError(f"Could not read Nginx template {template_path}: {exc}") from exc


def read_rendered(output_path: Path) -> str:
    try:
        return output_path.read_text(encoding=_ENCODING, errors=_ERRORS)
    except OSError as exc:
        raise FilesystemError(f"Could not read Nginx config {output_path}: {exc}") from exc


def substitute_port(template_text: str, port: int) -> str:
    return template_text.replace(HTTPS_PORT_TOKEN, str(port))


def read_rendered_port(template_text: str, rendered_text: str) -> int | None:
    """Recover the port baked into a rendered config.

    Each template line containing the token is turned into a pattern and
    searched for in the rendered text. Returns None when no line matches
    or a matching line carries conflicting values.
    """
    for line in template_text.splitlines():
        if HTTPS_PORT_TOKEN not in line:
            continue
        parts = [re.escape(part) for part in line.split(HTTPS_PORT_TOKEN)]
        pattern = re.compile("^" + r"(\d+)".join(parts) + "$", re.MULTILINE)
        match = pattern.search(rendered_text)
        if match is None:
            continue
        ports = set(match.groups())
        if len(ports) == 1:
            return int(ports.pop())
    return None


def detect_proxy_config_state(template_text: str, output_path: Path, port: int) -> ArtifactState:
    if not output_path.is_file():
        return ArtifactState.ABSENT
    rendered = read_rendered(output_path)
    if HTTPS_PORT_TOKEN not in template_text:
        return ArtifactState.CURRENT if rendered == template_text else ArtifactState.STALE
    if read_rendered_port(template_text, rendered) == port:
        return ArtifactState.CURRENT
    return ArtifactState.STALE


def render_proxy_config(
    port: int,
    template_path: Path,
    output_path: Path,
    previous_port: int | None,
    *,
    force: bool = False,
) -> bool:
    """Write the rendered config if needed. Returns True if the file was written.

    Decision order: missing output renders; a port differing from
    ``previous_port`` re-renders; anything else is skipped.
    """
    template_text = read_template(template_path)
    if output_path.is_file() and previous_port == port and not force:
        log.debug("%s already encodes port %d; skipping", output_path, port)
        return False

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(substitute_port(template_text, port), encoding=_ENCODING, errors=_ERRORS)
    except OSError as exc:
        raise FilesystemError(f"Could not write Nginx config {output_path}: {exc}") from exc
    log.debug("Rendered %s (port %s -> %d)", output_path, previous_port, port)
    return True


def ensure_proxy_config(port: int, template_path: Path, output_path: Path, *, force: bool = False) -> bool:
    """Detect the currently encoded port and render if it is stale or absent."""
    template_text = read_template(template_path)
    state = detect_proxy_config_state(template_text, output_path, port)
    if state is ArtifactState.CURRENT:
        previous_port: int | None = port
    elif state is ArtifactState.STALE:
        previous_port = read_rendered_port(template_text, read_rendered(output_path))
    else:
        previous_port = None
    return render_proxy_config(port, template_path, output_path, previous_port, force=force)
