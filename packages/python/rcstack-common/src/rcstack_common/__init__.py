"""rcstack common: shared models and constants for the rcstack CLI."""

from rcstack_common.config import PermissionMode, StackConfig
from rcstack_common.constants import (
    CERT_FILENAME,
    DEFAULT_DATA_DIR,
    HTTPS_PORT_TOKEN,
    KEY_FILENAME,
    PLACEHOLDER_SENTINEL,
    PROXY_CONF_FILENAME,
)
from rcstack_common.models.artifact import ArtifactState
from rcstack_common.models.setup_event import SetupEvent

__all__ = [
    "ArtifactState",
    "CERT_FILENAME",
    "DEFAULT_DATA_DIR",
    "HTTPS_PORT_TOKEN",
    "KEY_FILENAME",
    "PLACEHOLDER_SENTINEL",
    "PROXY_CONF_FILENAME",
    "PermissionMode",
    "SetupEvent",
    "StackConfig",
]
