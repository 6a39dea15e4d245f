"""Reparai diagnostic funnel service."""

__version__ = "0.1.0"
