"""Configuration for the figo client."""

from figo.config.settings import Settings, settings, DEFAULT_FINGERPRINTS
from figo.config.logging import setup_logging, get_logger, mask_sensitive_data

__all__ = [
    "Settings",
    "settings",
    "DEFAULT_FINGERPRINTS",
    "setup_logging",
    "get_logger",
    "mask_sensitive_data",
]
