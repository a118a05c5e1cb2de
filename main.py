"""
mapping_env – Main entry point.

Bootstrap: configure logging, load settings from the environment, and exit
non-zero when the configuration is unusable.
"""

import logging
import sys

from mapping_env.config.settings import get_settings
from mapping_env.env.errors import EnvVarError
from mapping_env.utils.logging_setup import configure_logging


def main() -> int:
    """Load settings once and report the outcome."""
    configure_logging()
    try:
        settings = get_settings()
    except EnvVarError as e:
        logging.error("Invalid configuration: %s", e)
        return 1

    logging.info("Configuration loaded: %s", settings.mappings)
    return 0


if __name__ == "__main__":
    sys.exit(main())
