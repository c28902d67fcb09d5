"""
Configuration module for the localization translator.

This module provides centralized configuration settings and logging setup
used throughout the package.

Submodules:
    settings: Environment-driven constants and the TranslatorConfig object.
    logging_config: Centralized logging configuration.
"""

from .settings import *
from .logging_config import setup_logging
