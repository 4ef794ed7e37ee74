"""
Configuration module.

Exports:
    get_settings: Function to get cached settings
    Settings: Settings model
    load_mapping / parse_mapping: Field mapping loaders
    DEFAULT_FIELD_MAPPING: Mapping used when no file is configured
    configure_logging / get_run_logger: Logging setup
"""

from config.settings import get_settings, Settings
from config.mappings import DEFAULT_FIELD_MAPPING, load_mapping, parse_mapping
from config.logging_config import configure_logging, get_run_logger

__all__ = [
    # Settings
    "get_settings",
    "Settings",

    # Mappings
    "DEFAULT_FIELD_MAPPING",
    "load_mapping",
    "parse_mapping",

    # Logging
    "configure_logging",
    "get_run_logger",
]
