"""Append-only JSONL audit trail of setup runs."""

from __future__ import annotations

import getpass
import logging
import os
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator

from rcstack_common import SetupEvent, StackConfig

log = logging.getLogger(__name__)


def _get_actor() -> str:
    try:
        return os.environ.get("RCSTACK_ACTOR") or getpass.getuser()
    except (KeyError, OSError):
        return "unknown"


def _write_jsonl(path: Path, event: SetupEvent) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "a") as f:
        f.write(event.to_jsonl() + "\n")


def log_event(cfg: StackConfig, event: SetupEvent) -> None:
    """Append an event to the project's audit log. Write failures are logged, not raised."""
    try:
        _write_jsonl(cfg.audit_log_path, event)
    except OSError as exc:
        log.warning("Could not write audit log %s: %s", cfg.audit_log_path, exc)


@contextmanager
def audit(cfg: StackConfig, action: str, target: str = "", **params: Any) -> Generator[SetupEvent, None, None]:
    """Context manager that records timing and success/failure."""
    event = SetupEvent(
        actor=_get_actor(),
        action=action,
        target=target,
        params=params,
    )
    start = time.monotonic()
    try:
        yield event
        event.result = "success"
    except Exception as exc:
        event.result = "failure"
        event.error = str(exc)
        raise
    finally:
        event.duration_ms = int((time.monotonic() - start) * 1000)
        log_event(cfg, event)
