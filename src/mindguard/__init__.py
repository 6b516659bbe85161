"""Mindguard - emotional pattern and risk monitoring for journal entries."""

__version__ = "0.1.0"
