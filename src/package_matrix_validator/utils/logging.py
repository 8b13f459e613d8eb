"""
Logging setup.

All modules log through ``get_logger(__name__)``; the CLI calls
``configure_logging`` once with the configured level.
"""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def parse_level(level: str) -> int:
	"""Map a level name such as ``debug`` to its number, INFO if unknown."""
	value = logging.getLevelName(level.upper())
	return value if isinstance(value, int) else logging.INFO


def configure_logging(level: str = "info") -> int:
	"""
	Configure root logging with the application format.

	Parameters:
		level: Log level name (e.g. "info", "debug", "warning").

	Returns:
		The numeric level applied to the root logger.
	"""
	lvl = parse_level(level)
	logging.basicConfig(level=lvl, format=LOG_FORMAT)
	logging.getLogger().setLevel(lvl)
	return lvl


def get_logger(name: str) -> logging.Logger:
	return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger", "parse_level", "LOG_FORMAT"]
