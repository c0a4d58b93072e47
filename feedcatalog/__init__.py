"""Podcasting 2.0 music feed catalog."""

__version__ = "1.0.0"
