"""Load and validate the stack configuration from a .env file."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

from dotenv import dotenv_values
from pydantic import ValidationError

from rcstack_common import PLACEHOLDER_SENTINEL, StackConfig
from rcstack_common.constants import ENV_FILENAME

from rcstack.errors import ConfigurationError, UnconfiguredPlaceholderError

log = logging.getLogger(__name__)


def read_env_file(path: Path) -> dict[str, str | None]:
    """Parse a dotenv file into a mapping without touching os.environ."""
    if not path.is_file():
        raise ConfigurationError(f"{path} not found! This file is required. Run 'rcstack init' to create one.")
    try:
        return dict(dotenv_values(path, encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"Could not read {path}: {exc}") from exc


def find_placeholders(env: Mapping[str, str | None]) -> list[str]:
    """Return the keys whose value still contains the placeholder sentinel."""
    return sorted(key for key, value in env.items() if value and PLACEHOLDER_SENTINEL in value)


def validate_configuration(
    env: Mapping[str, str | None],
    project_dir: Path,
    *,
    env_file: Path | None = None,
) -> StackConfig:
    """Build a fully defaulted StackConfig from a raw key/value mapping.

    Raises ConfigurationError if any value still carries the placeholder
    sentinel, or if a value fails validation. Empty values count as unset.
    """
    unconfigured = find_placeholders(env)
    if unconfigured:
        raise UnconfiguredPlaceholderError(
            f"unconfigured placeholder {PLACEHOLDER_SENTINEL} in: {', '.join(unconfigured)}",
            keys=unconfigured,
        )

    values = {key: value.strip() for key, value in env.items() if value and value.strip()}
    try:
        cfg = StackConfig.model_validate({**values, "project_dir": project_dir, "env_file": env_file})
    except ValidationError as exc:
        bad = sorted({str(err["loc"][0]) for err in exc.errors() if err["loc"]})
        raise ConfigurationError(f"invalid configuration values: {', '.join(bad)}\n{exc}", keys=bad) from exc

    log.debug("Resolved configuration: %s", cfg.model_dump(mode="json"))
    return cfg


def load_config(project_dir: Path, env_file: Path | None = None) -> StackConfig:
    """Read <project_dir>/.env (or an explicit env file) and validate it."""
    project_dir = project_dir.resolve()
    path = env_file or project_dir / ENV_FILENAME
    return validate_configuration(read_env_file(path), project_dir, env_file=env_file)
