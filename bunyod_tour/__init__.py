"""Bunyod-Tour backend: multilingual tour catalogue and booking API."""

__version__ = "1.0.0"
