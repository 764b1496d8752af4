"""rcstack: bootstrap tooling for the Rocket.Chat Unraid stack."""

__version__ = "0.1.0"
