"""Core infrastructure module.

This module exports core utilities used across features.
Never imports from features - only from external libraries.
"""

from .config import Settings, get_settings, get_global_settings
from .cache import CacheStore, CacheTTL
from .enums import RankedQueue, PlayerRole
from .logging import setup_logging, get_logger
from .responses import ok_payload, error_payload, error_payload_from_exception

__all__ = [
    # Config
    "Settings",
    "get_settings",
    "get_global_settings",
    # Cache
    "CacheStore",
    "CacheTTL",
    # Enums
    "RankedQueue",
    "PlayerRole",
    # Logging
    "setup_logging",
    "get_logger",
    # Responses
    "ok_payload",
    "error_payload",
    "error_payload_from_exception",
]
