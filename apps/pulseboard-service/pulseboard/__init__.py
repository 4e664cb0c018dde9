"""Pulseboard: task and productivity dashboard service."""

__version__ = "1.0.0"
