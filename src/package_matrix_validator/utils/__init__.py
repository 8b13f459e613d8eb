"""Shared utility functions.

This subpackage provides common utility functions used across
the application.

Key modules:
    - paths: Path safety and validation utilities
    - logging: Logging configuration
    - protocols: Protocol definitions for dependency injection
"""

from .paths import ensure_within
from .logging import configure_logging, get_logger, parse_level
from .protocols import ContainerRunnerProtocol

__all__ = [
    # paths
    "ensure_within",
    # logging
    "configure_logging",
    "get_logger",
    "parse_level",
    # protocols
    "ContainerRunnerProtocol",
]
