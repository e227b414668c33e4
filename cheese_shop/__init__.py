"""Cheese catalogue REST service persisted in a single JSON file."""

__version__ = "1.0.0"
