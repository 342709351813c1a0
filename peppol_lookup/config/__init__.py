"""Configuration loading for Peppol directory lookup."""

from peppol_lookup.config.manager import ConfigManager

__all__ = ["ConfigManager"]
