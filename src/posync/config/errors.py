"""Configuration error definitions."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised when configuration values are malformed or out of range."""


class MissingConfigurationError(ConfigurationError):
    """Raised when required environment variables are absent or blank."""
