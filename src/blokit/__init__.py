"""Blokit - headless todo list and focus block timer."""

__version__ = "0.1.0"
