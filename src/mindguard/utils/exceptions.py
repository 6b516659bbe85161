"""Custom exceptions for Mindguard."""


class MindguardError(Exception):
    """Base exception for all Mindguard errors."""

    pass


class ConfigurationError(MindguardError):
    """Error in configuration or settings."""

    pass
