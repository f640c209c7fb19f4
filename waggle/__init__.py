"""Waggle match service: mutual-like detection and match notifications."""

__version__ = "1.0.0"
