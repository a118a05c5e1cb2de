"""
Logging setup for entry points and actions.

Library modules only create loggers with logging.getLogger(__name__); the
process entry point calls configure_logging() once.
"""

import logging
import os
from typing import Optional


def _env(name: str, default: str) -> str:
    value = os.getenv(name)
    return default if value is None or value == "" else value


def configure_logging(
    *,
    default_level: str = "INFO",
    fmt: str = "%(asctime)s %(levelname)s %(name)s: %(message)s",
    datefmt: str = "%Y-%m-%d %H:%M:%S",
    force: bool = True,
    level: Optional[str] = None,
) -> None:
    """
    Configure stdlib logging in a consistent, idempotent way.

    **Environment variables**:
      - LOG_LEVEL: overrides default_level (e.g. DEBUG, INFO).
      - LOG_FORCE: when set to 0/false/no, an existing configuration is kept.

    Args:
        default_level: Level used when LOG_LEVEL is not set.
        fmt: Record format.
        datefmt: Timestamp format.
        force: Replace handlers installed by an earlier configuration.
        level: Explicit level name; takes precedence over LOG_LEVEL
               (actions pass "DEBUG" for --verbose).
    """
    level_name = (level or _env("LOG_LEVEL", default_level)).upper()
    numeric_level = getattr(logging, level_name, logging.INFO)

    env_force = _env("LOG_FORCE", "1").lower() not in {"0", "false", "no"}

    logging.basicConfig(level=numeric_level, format=fmt, datefmt=datefmt, force=(force and env_force))
