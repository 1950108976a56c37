"""
Core module for spot-names.

This module provides the foundational components used throughout the application:
    - exceptions: Custom exception classes for error handling
    - config: Configuration loading and validation
    - logger: Logging to stderr and an optional log file

Usage:
    from spot_names.core import (
        Config, load_config,
        setup_logging, get_logger,
        SpotNamesError, ConfigError, SpotifyError
    )
"""

from spot_names.core.config import (
    Config,
    ConversionConfig,
    SpotifyConfig,
    load_config,
)
from spot_names.core.exceptions import (
    ConfigError,
    InvalidUriError,
    LocalUriFormatError,
    SpotifyError,
    SpotNamesError,
    UriError,
    UriKindMismatchError,
)
from spot_names.core.logger import (
    get_logger,
    setup_logging,
    shutdown_logging,
)

__all__ = [
    # Config
    "Config",
    "SpotifyConfig",
    "ConversionConfig",
    "load_config",
    # Exceptions
    "SpotNamesError",
    "ConfigError",
    "UriError",
    "InvalidUriError",
    "UriKindMismatchError",
    "LocalUriFormatError",
    "SpotifyError",
    # Logger
    "setup_logging",
    "get_logger",
    "shutdown_logging",
]
