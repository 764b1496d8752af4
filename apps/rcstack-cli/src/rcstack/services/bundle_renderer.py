"""Jinja2-based renderer for the starter deployment bundle."""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from rcstack_common import HTTPS_PORT_TOKEN, PLACEHOLDER_SENTINEL
from rcstack_common.constants import (
    COMPOSE_FILENAME,
    DEFAULT_DATA_DIR,
    DEFAULT_NGINX_HTTP_PORT,
    DEFAULT_NGINX_HTTPS_PORT,
    DEFAULT_RC_HOST_PORT,
    ENV_FILENAME,
    PROXY_TEMPLATE_FILENAME,
)

_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"

# template name -> output filename
BUNDLE_TEMPLATES = {
    "env.j2": ENV_FILENAME,
    "docker-compose.yml.j2": COMPOSE_FILENAME,
    "default.conf.template.j2": PROXY_TEMPLATE_FILENAME,
}


def _get_env() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(_TEMPLATE_DIR)),
        autoescape=select_autoescape([]),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )


def bundle_context(data_dir: Path = DEFAULT_DATA_DIR) -> dict:
    return {
        "data_dir": str(data_dir),
        "placeholder": PLACEHOLDER_SENTINEL,
        "https_port_token": HTTPS_PORT_TOKEN,
        "https_port": DEFAULT_NGINX_HTTPS_PORT,
        "http_port": DEFAULT_NGINX_HTTP_PORT,
        "rc_port": DEFAULT_RC_HOST_PORT,
    }


def render_bundle_file(template_name: str, **context) -> str:
    env = _get_env()
    template = env.get_template(template_name)
    return template.render(**{**bundle_context(), **context})


def write_bundle(target_dir: Path, *, data_dir: Path = DEFAULT_DATA_DIR, force: bool = False) -> dict[Path, bool]:
    """Render every bundle file into target_dir.

    Existing files are kept unless ``force``. Returns {path: written}.
    """
    target_dir.mkdir(parents=True, exist_ok=True)
    results: dict[Path, bool] = {}
    for template_name, filename in BUNDLE_TEMPLATES.items():
        path = target_dir / filename
        if path.exists() and not force:
            results[path] = False
            continue
        path.write_text(render_bundle_file(template_name, data_dir=str(data_dir)))
        results[path] = True
    return results
