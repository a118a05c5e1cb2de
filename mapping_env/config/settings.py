"""
Process-wide settings for mapping handlers.

**Conceptual**: This module is the single entrypoint for configuration. It
loads a .env file (if present) into the process environment, then builds the
typed subsystem settings from that environment. Loading fails fast: a missing
or malformed variable raises at startup, not the first time a cache or runtime
reads its limit.

**Why a facade over mapping_env.env?**
  - One import point (from mapping_env.config.settings import get_settings).
  - Easy to test (build Settings from an explicit dict instead of os.environ).
  - Room for further subsystems without touching consumers.

This module uses python-dotenv to load .env files and dataclasses for type safety.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from mapping_env.env.mappings import MappingEnvVars

logger = logging.getLogger(__name__)

# Load .env from project root. Variables already set in the process win.
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path, override=False)


@dataclass(frozen=True)
class Settings:
    """
    Global settings.

    **Usage pattern**:
      ```python
      from mapping_env.config.settings import get_settings

      settings = get_settings()
      cache_budget = settings.mappings.entity_cache_size
      ```

    Attributes:
        mappings: Mapping-handler configuration (cache, runtime and IPFS
                  limits). Renders as a placeholder, never as values.
    """
    mappings: MappingEnvVars

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Load global settings from environment variables.

        Args:
            env: Environment snapshot. Defaults to a copy of os.environ.

        Returns:
            Settings with every subsystem loaded.

        Raises:
            MissingVariable: A required variable is absent.
            InvalidFormat: A variable is set to text its parser rejects.
        """
        mappings = MappingEnvVars.from_env(env)
        logger.debug("Loaded mapping settings: %r", mappings)
        return cls(mappings=mappings)


_default_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get the global settings singleton.

    Settings are loaded from the environment on first call, then cached for
    reuse. Tests build their own Settings.from_env({...}) or call
    reset_settings() after changing os.environ.

    Raises:
        MissingVariable, InvalidFormat: On first call, if loading fails. The
        failure is not cached; the next call tries again.
    """
    global _default_settings

    if _default_settings is None:
        _default_settings = Settings.from_env()

    return _default_settings


def reset_settings() -> None:
    """Clear the cached settings singleton (for testing)."""
    global _default_settings
    _default_settings = None
