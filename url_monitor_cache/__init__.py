"""Namespace-scoped Redis cache client for url-monitor."""

__version__ = "1.0.0"
