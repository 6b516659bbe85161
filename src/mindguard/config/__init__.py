"""Configuration module for Mindguard."""

from mindguard.config.settings import MonitoringThresholds, Settings, get_settings

__all__ = ["Settings", "get_settings", "MonitoringThresholds"]
