"""
Configuration management for geneannot

This module provides configuration loading, validation, and management
for gene annotation runs.
"""

from .config import (Config, get_default_config, load_config, save_config,
                     validate_config)

__all__ = [
    "Config",
    "load_config",
    "save_config",
    "validate_config",
    "get_default_config",
]
