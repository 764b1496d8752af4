"""Custom exceptions for the rcstack CLI."""

from __future__ import annotations

from collections.abc import Sequence


class SetupError(Exception):
    """Base exception for all rcstack operations."""

    def __init__(self, message: str, *, exit_code: int = 1):
        super().__init__(message)
        self.exit_code = exit_code


class ConfigurationError(SetupError):
    """The .env configuration is missing, invalid or still has placeholders."""

    def __init__(self, message: str, *, keys: Sequence[str] = (), exit_code: int = 1):
        super().__init__(message, exit_code=exit_code)
        self.keys = list(keys)


class UnconfiguredPlaceholderError(ConfigurationError):
    """A value in .env still contains the placeholder sentinel."""


class PrerequisiteError(SetupError):
    """One or more required external tools could not be resolved."""

    def __init__(self, tools: Sequence[str], *, exit_code: int = 1):
        self.tools = list(tools)
        super().__init__(f"Missing required tools: {', '.join(self.tools)}", exit_code=exit_code)


class FilesystemError(SetupError):
    """Directory, file or permission operation failed."""


class CryptoError(SetupError):
    """Key or certificate generation failed."""


class TemplateError(SetupError):
    """Proxy config template is missing or unreadable."""


class DockerError(SetupError):
    """Docker/Compose subprocess failed."""
