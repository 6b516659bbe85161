"""Database layer for Mindguard."""
