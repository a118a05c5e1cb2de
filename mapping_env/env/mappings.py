"""
Environment configuration for mapping handlers.

**Conceptual**: Configuration is materialized in two stages.

  1. RawMappingEnvVars holds what was literally provided: one field per
     environment variable, typed but still in the units the variable is
     documented in (kilobytes, megabytes, seconds).
  2. MappingEnvVars holds what the rest of the system consumes: byte counts,
     timedelta values and parsed versions. derive() maps stage 1 to stage 2
     and cannot fail.

Parsing (which can fail) and unit conversion (which cannot) stay separate, so
each is testable on its own and the raw stage stays available for
diagnostics.

**Redaction**: MappingEnvVars renders as the fixed text "env vars" through
repr(), str() and format(). Consumers read fields directly.
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Mapping, Optional

from mapping_env.env.loader import env_var, load_from_env
from mapping_env.env.parsers import (
    BOOLEAN,
    U64,
    USIZE,
    VERSION,
    NoUnderscores,
    Version,
    optional,
    with_default,
)

REDACTED_PLACEHOLDER = "env vars"

KILOBYTE = 1000
MEGABYTE = 1000 * 1000

# Whole seconds representable by timedelta; longer timeouts saturate here.
_MAX_TIMEDELTA_SECONDS = timedelta.max.days * 24 * 60 * 60


@dataclass(frozen=True)
class RawMappingEnvVars:
    """
    Mapping-handler variables as parsed from the environment.

    Field names carry the unit the variable is expressed in. Defaults either
    go through the field's parser as literal text (`default=...`) or are
    baked into a with_default() parser.
    """
    entity_cache_size_in_kb: int = env_var(
        "GRAPH_ENTITY_CACHE_SIZE", USIZE, default="10000"
    )
    max_api_version: Version = env_var(
        "GRAPH_MAX_API_VERSION", VERSION, default="0.0.7"
    )
    mapping_handler_timeout_in_secs: Optional[int] = env_var(
        "GRAPH_MAPPING_HANDLER_TIMEOUT", optional(U64)
    )
    runtime_max_stack_size: int = env_var(
        "GRAPH_RUNTIME_MAX_STACK_SIZE", with_default(NoUnderscores(USIZE), 512 * 1024)
    )
    query_cache_blocks: int = env_var(
        "GRAPH_QUERY_CACHE_BLOCKS", NoUnderscores(USIZE), default="2"
    )
    query_cache_max_mem_in_mb: int = env_var(
        "GRAPH_QUERY_CACHE_MAX_MEM", NoUnderscores(USIZE), default="1000"
    )
    query_cache_stale_period: int = env_var(
        "GRAPH_QUERY_CACHE_STALE_PERIOD", U64, default="100"
    )

    # IPFS
    max_ipfs_cache_file_size: int = env_var(
        "GRAPH_MAX_IPFS_CACHE_FILE_SIZE", with_default(USIZE, 1024 * 1024)
    )
    max_ipfs_cache_size: int = env_var(
        "GRAPH_MAX_IPFS_CACHE_SIZE", U64, default="50"
    )
    ipfs_timeout_in_secs: int = env_var(
        "GRAPH_IPFS_TIMEOUT", U64, default="30"
    )
    max_ipfs_map_file_size: int = env_var(
        "GRAPH_MAX_IPFS_MAP_FILE_SIZE", with_default(USIZE, 256 * 1024 * 1024)
    )
    max_ipfs_file_bytes: Optional[int] = env_var(
        "GRAPH_MAX_IPFS_FILE_BYTES", optional(USIZE)
    )
    allow_non_deterministic_ipfs: bool = env_var(
        "GRAPH_ALLOW_NON_DETERMINISTIC_IPFS", BOOLEAN, default="false"
    )

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "RawMappingEnvVars":
        """
        Load raw mapping-handler variables.

        Raises:
            MissingVariable, InvalidFormat: See load_from_env().
        """
        return load_from_env(cls, env)


@dataclass(frozen=True, repr=False)
class MappingEnvVars:
    """
    Runtime-facing mapping-handler configuration.

    Attributes:
        entity_cache_size: Size limit of the entity LFU cache, in bytes.
                          Default 10 MB.
        max_api_version: Highest mapping API version accepted. Default 0.0.7.
        timeout: Mapping handler timeout, or None for no timeout.
        max_stack_size: Maximum stack size for the WASM runtime, in bytes.
                       Default 512 KiB.
        query_cache_blocks: Blocks per network kept in the query cache. Lookup
                           is linear in this value; 0 disables the cache.
                           Default 2.
        query_cache_max_mem: Total memory budget of the query cache, in bytes.
                            Default 1 GB.
        query_cache_stale_period: Default 100.
        max_ipfs_cache_file_size: Largest file kept in the IPFS cache, in
                                 bytes. Default 1 MiB.
        max_ipfs_cache_size: Number of items in the IPFS cache. Default 50.
        ipfs_timeout: Timeout for all IPFS requests. Default 30 s.
        max_ipfs_map_file_size: Size limit for `ipfs.map` files, in bytes.
                               Default 256 MiB.
        max_ipfs_file_bytes: Size limit for `ipfs.cat`, or None for no limit.
        allow_non_deterministic_ipfs: Off by default.
    """
    entity_cache_size: int
    max_api_version: Version
    timeout: Optional[timedelta]
    max_stack_size: int
    query_cache_blocks: int
    query_cache_max_mem: int
    query_cache_stale_period: int

    max_ipfs_cache_file_size: int
    max_ipfs_cache_size: int
    ipfs_timeout: timedelta
    max_ipfs_map_file_size: int
    max_ipfs_file_bytes: Optional[int]
    allow_non_deterministic_ipfs: bool

    # Never render field values; any of them may come from a sensitive source.
    def __repr__(self) -> str:
        return REDACTED_PLACEHOLDER

    def __str__(self) -> str:
        return REDACTED_PLACEHOLDER

    def __format__(self, format_spec: str) -> str:
        return format(REDACTED_PLACEHOLDER, format_spec)

    @classmethod
    def from_raw(cls, raw: RawMappingEnvVars) -> "MappingEnvVars":
        return derive(raw)

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "MappingEnvVars":
        """
        Load and derive mapping-handler configuration in one step.

        Raises:
            MissingVariable, InvalidFormat: If the raw stage fails.
        """
        return derive(RawMappingEnvVars.from_env(env))


def _seconds(value: int) -> timedelta:
    return timedelta(seconds=min(value, _MAX_TIMEDELTA_SECONDS))


def derive(raw: RawMappingEnvVars) -> MappingEnvVars:
    """
    Convert raw variables into runtime units.

    **Conversions**:
      - kilobytes x 1000 -> bytes (entity cache size)
      - megabytes x 1,000,000 -> bytes (query cache memory)
      - seconds -> timedelta (IPFS timeout, handler timeout when set),
        saturating at the largest timedelta
      - everything else unchanged

    Pure and total: any RawMappingEnvVars yields a MappingEnvVars.
    """
    timeout = None
    if raw.mapping_handler_timeout_in_secs is not None:
        timeout = _seconds(raw.mapping_handler_timeout_in_secs)

    return MappingEnvVars(
        entity_cache_size=raw.entity_cache_size_in_kb * KILOBYTE,
        max_api_version=raw.max_api_version,
        timeout=timeout,
        max_stack_size=raw.runtime_max_stack_size,
        query_cache_blocks=raw.query_cache_blocks,
        query_cache_max_mem=raw.query_cache_max_mem_in_mb * MEGABYTE,
        query_cache_stale_period=raw.query_cache_stale_period,
        max_ipfs_cache_file_size=raw.max_ipfs_cache_file_size,
        max_ipfs_cache_size=raw.max_ipfs_cache_size,
        ipfs_timeout=_seconds(raw.ipfs_timeout_in_secs),
        max_ipfs_map_file_size=raw.max_ipfs_map_file_size,
        max_ipfs_file_bytes=raw.max_ipfs_file_bytes,
        allow_non_deterministic_ipfs=raw.allow_non_deterministic_ipfs,
    )
