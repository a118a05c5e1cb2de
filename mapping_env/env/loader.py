"""
Generic "load a dataclass from environment variables" machinery.

**Conceptual**: A configuration class is a frozen dataclass whose fields are
declared with `env_var(...)`. Each declaration names the source variable, the
parser for its text, and optionally a literal default. `load_from_env()` walks
the fields in declaration order and either returns a fully built instance or
raises the first failure; a half-built instance never escapes.

**Usage pattern**:
  ```python
  @dataclass(frozen=True)
  class CacheEnv:
      blocks: int = env_var("CACHE_BLOCKS", USIZE, default="2")
      budget: Optional[int] = env_var("CACHE_BUDGET", optional(USIZE))

  raw = load_from_env(CacheEnv, {"CACHE_BLOCKS": "5"})
  ```

`describe_env()` runs the same resolution without raising and reports what
happened to each variable, for diagnostics.
"""

import dataclasses
import logging
import os
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Type, TypeVar

from mapping_env.env.errors import EnvVarError, InvalidFormat, MissingVariable
from mapping_env.env.parsers import EnvParser

logger = logging.getLogger(__name__)

T = TypeVar("T")

_METADATA_KEY = "env_var"

SOURCE_ENV = "env"
SOURCE_DEFAULT = "default"
SOURCE_UNSET = "unset"


@dataclass(frozen=True)
class EnvVar:
    """
    Declaration of one environment-backed field.

    Attributes:
        name: Environment variable name.
        parser: Parser applied to the variable's text.
        default: Literal text used when the variable is absent. It goes
                 through the same parser as a real value.
    """
    name: str
    parser: EnvParser
    default: Optional[str] = None


def env_var(name: str, parser: EnvParser, default: Optional[str] = None) -> Any:
    """
    Declare a dataclass field sourced from an environment variable.

    Fields with neither a default nor a parser that accepts absence are
    required.

    Returns:
        A dataclasses.field carrying the EnvVar declaration in its metadata.
        The field has no dataclass default, so the constructor still demands
        every value explicitly.
    """
    return dataclasses.field(metadata={_METADATA_KEY: EnvVar(name, parser, default)})


def env_vars(cls: type) -> List[EnvVar]:
    """List the EnvVar declarations of a configuration class, in field order."""
    return [
        f.metadata[_METADATA_KEY]
        for f in dataclasses.fields(cls)
        if _METADATA_KEY in f.metadata
    ]


def _snapshot(env: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    # Take one copy so the whole load sees a consistent environment.
    return dict(os.environ) if env is None else env


def _resolve(var: EnvVar, env: Mapping[str, str]):
    """Return (source, raw_text, value) for one variable, or raise EnvVarError."""
    raw = env.get(var.name)
    source = SOURCE_ENV
    if raw is None and var.default is not None:
        raw = var.default
        source = SOURCE_DEFAULT

    if raw is None:
        if not var.parser.accepts_missing:
            raise MissingVariable(var.name)
        return SOURCE_UNSET, None, var.parser.parse(None)

    try:
        value = var.parser.parse(raw)
    except ValueError as e:
        raise InvalidFormat(var.name, raw, str(e)) from e
    return source, raw, value


def load_from_env(cls: Type[T], env: Optional[Mapping[str, str]] = None) -> T:
    """
    Build `cls` from environment variables.

    Args:
        cls: Dataclass whose fields are declared with env_var().
        env: Environment snapshot. Defaults to a copy of os.environ.

    Returns:
        A fully populated instance of `cls`.

    Raises:
        MissingVariable: A required variable is absent.
        InvalidFormat: A variable (or a declared default) fails its parser.
        Both are raised for the first failing field in declaration order.
    """
    env = _snapshot(env)
    values = {}
    defaulted = []
    for f in dataclasses.fields(cls):
        var = f.metadata.get(_METADATA_KEY)
        if var is None:
            continue
        source, _, values[f.name] = _resolve(var, env)
        if source != SOURCE_ENV:
            defaulted.append(var.name)

    if defaulted:
        logger.debug("%s: using defaults for %s", cls.__name__, ", ".join(defaulted))
    return cls(**values)


@dataclass(frozen=True)
class EnvVarReport:
    """
    Outcome of resolving one variable, as reported by describe_env().

    Attributes:
        name: Environment variable name.
        source: "env" when set, "default" when the declared literal applied,
                "unset" when absent with no literal default.
        raw_text: Text that was parsed, or None when nothing was.
        value: Parsed value, or None on error.
        error: The EnvVarError raised for this variable, if any.
    """
    name: str
    source: str
    raw_text: Optional[str] = None
    value: Any = None
    error: Optional[EnvVarError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def describe_env(cls: type, env: Optional[Mapping[str, str]] = None) -> List[EnvVarReport]:
    """
    Resolve every declared variable of `cls` without raising.

    Unlike load_from_env(), every field is resolved even after a failure, so
    an operator sees all misconfigured variables at once.
    """
    env = _snapshot(env)
    reports = []
    for var in env_vars(cls):
        try:
            source, raw, value = _resolve(var, env)
        except EnvVarError as e:
            source = SOURCE_ENV if var.name in env else (
                SOURCE_DEFAULT if var.default is not None else SOURCE_UNSET
            )
            reports.append(EnvVarReport(
                name=var.name,
                source=source,
                raw_text=getattr(e, "raw_text", None),
                error=e,
            ))
            continue
        reports.append(EnvVarReport(name=var.name, source=source, raw_text=raw, value=value))

    logger.debug(
        "%s: resolved %d variables, %d failing",
        cls.__name__, len(reports), sum(1 for r in reports if not r.ok),
    )
    return reports
