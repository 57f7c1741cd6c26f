"""Tracker exports to PI planning board layouts and back."""

__version__ = "0.1.0"
