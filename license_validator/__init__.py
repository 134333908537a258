"""Dependency license validation and audit reporting."""

__version__ = "0.1.0"
