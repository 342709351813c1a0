"""Peppol Directory participant lookup."""

__version__ = "0.1.0"
