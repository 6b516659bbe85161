"""Utility modules for Mindguard."""

from mindguard.utils.exceptions import ConfigurationError, MindguardError

__all__ = [
    "MindguardError",
    "ConfigurationError",
]
