"""
Typed parsers for the textual forms environment variables take.

**Conceptual**: Every configuration field names one parser. A parser turns the
raw text of a variable into a typed value (int, bool, Version, ...) or raises
ValueError with a short reason. The loader turns that ValueError into an
InvalidFormat error that names the variable.

**Absence**: Most parsers never see a missing variable; the loader reports it
as MissingVariable. Parsers that set `accepts_missing = True` (optional() and
with_default()) are instead called with `None` and decide what absence means.

**Vocabulary**:
  - UnsignedInt: decimal digits with an optional leading "+", range
    0 .. 2**bits - 1. No "_" grouping.
  - NoUnderscores: same as its inner parser, but rejects "_" up front with
    its own reason.
  - EnvVarBoolean: "true"/"1" and "false"/"0", case-insensitive. Nothing else.
  - VersionParser: MAJOR.MINOR.PATCH with optional -prerelease and +build.
"""

import re
from dataclasses import dataclass, field
from functools import total_ordering
from typing import Any, Optional, Protocol, Tuple


class EnvParser(Protocol):
    """
    Parsing interface shared by every field parser.

    **Usage**: Consumers (the loader) call `parse(raw)` with the variable's
    text. They only pass `None` when `accepts_missing` is True.
    """

    accepts_missing: bool

    def parse(self, raw: Optional[str]) -> Any:
        """
        Parse raw text into a typed value.

        Raises:
            ValueError: If the text is malformed for this parser.
        """
        ...


_UNSIGNED_INT_RE = re.compile(r"\+?[0-9]+")


class UnsignedInt:
    """
    Plain unsigned integer parser with a fixed bit width.

    Attributes:
        bits: Width of the target integer type. 64 covers both the
              platform-sized and the explicit 64-bit fields.
    """

    accepts_missing = False

    def __init__(self, bits: int = 64):
        self.bits = bits
        self.max_value = (1 << bits) - 1

    def parse(self, raw: Optional[str]) -> int:
        if raw is None:
            raise ValueError("no value")
        if not _UNSIGNED_INT_RE.fullmatch(raw):
            raise ValueError("not a non-negative integer")
        value = int(raw, 10)
        if value > self.max_value:
            raise ValueError(f"exceeds the {self.bits}-bit maximum {self.max_value}")
        return value

    def __repr__(self) -> str:
        return f"UnsignedInt(bits={self.bits})"


class NoUnderscores:
    """
    Reject "_" before delegating to an inner parser.

    **Conceptual**: "1_000" and "1000" mean the same thing to some tools and
    different things to others. Fields wrapped in NoUnderscores refuse the
    grouped form outright instead of silently picking one meaning.
    """

    accepts_missing = False

    def __init__(self, inner: EnvParser):
        self.inner = inner

    def parse(self, raw: Optional[str]) -> Any:
        if raw is not None and "_" in raw:
            raise ValueError("'_' separators are not allowed")
        return self.inner.parse(raw)

    def __repr__(self) -> str:
        return f"NoUnderscores({self.inner!r})"


class WithDefault:
    """
    Substitute a fixed constant when the variable is missing or empty.

    Built with `with_default()`. The inner parser is never consulted for
    missing or empty text, so its own handling of "" does not matter.
    """

    accepts_missing = True

    def __init__(self, inner: EnvParser, default: Any):
        self.inner = inner
        self.default = default

    def parse(self, raw: Optional[str]) -> Any:
        if raw is None or raw == "":
            return self.default
        return self.inner.parse(raw)

    def __repr__(self) -> str:
        return f"WithDefault({self.inner!r}, {self.default!r})"


def with_default(inner: EnvParser, default: Any) -> WithDefault:
    """
    Build a parser that closes over its own default constant.

    **Conceptual**: Many fields share one parsing rule (say, a byte count) but
    each has its own fallback. Closing the fallback into the parser keeps the
    field declaration a single line and needs no runtime configuration.

    Args:
        inner: Parser used whenever the variable holds non-empty text.
        default: Value returned when the variable is missing or "".

    Returns:
        A parser implementing the EnvParser interface.

    Usage example:
        >>> parser = with_default(NoUnderscores(USIZE), 512 * 1024)
        >>> parser.parse("")
        524288
        >>> parser.parse("4096")
        4096
    """
    return WithDefault(inner, default)


class OptionalValue:
    """Yield None for an absent variable, otherwise delegate to `inner`."""

    accepts_missing = True

    def __init__(self, inner: EnvParser):
        self.inner = inner

    def parse(self, raw: Optional[str]) -> Any:
        if raw is None:
            return None
        return self.inner.parse(raw)

    def __repr__(self) -> str:
        return f"optional({self.inner!r})"


def optional(inner: EnvParser) -> OptionalValue:
    """Mark a field as legitimately absent; absence parses to None."""
    return OptionalValue(inner)


class EnvVarBoolean:
    """
    Boolean parser with a closed vocabulary.

    Accepted tokens (case-insensitive): "true" and "1" map to True, "false"
    and "0" map to False. Other truthy-looking text such as "yes" or "on" is
    rejected rather than guessed at.
    """

    accepts_missing = False

    TRUE_TOKENS = frozenset({"true", "1"})
    FALSE_TOKENS = frozenset({"false", "0"})

    def parse(self, raw: Optional[str]) -> bool:
        token = (raw or "").lower()
        if token in self.TRUE_TOKENS:
            return True
        if token in self.FALSE_TOKENS:
            return False
        raise ValueError("expected one of: true, false, 1, 0")

    def __repr__(self) -> str:
        return "EnvVarBoolean()"


_NUMERIC_ID = r"0|[1-9][0-9]*"
_PRERELEASE_ID = r"0|[1-9][0-9]*|[0-9]*[A-Za-z-][0-9A-Za-z-]*"
_BUILD_ID = r"[0-9A-Za-z-]+"
_VERSION_RE = re.compile(
    rf"(?P<major>{_NUMERIC_ID})\.(?P<minor>{_NUMERIC_ID})\.(?P<patch>{_NUMERIC_ID})"
    rf"(?:-(?P<pre>(?:{_PRERELEASE_ID})(?:\.(?:{_PRERELEASE_ID}))*))?"
    rf"(?:\+(?P<build>{_BUILD_ID}(?:\.{_BUILD_ID})*))?"
)


@total_ordering
@dataclass(frozen=True)
class Version:
    """
    Semantic version (SemVer 2.0.0).

    **Ordering**: Compares by (major, minor, patch); a version with a
    pre-release tag sorts before the same version without one; build
    metadata is ignored for ordering and equality but kept for display.

    Attributes:
        major, minor, patch: Non-negative version components.
        pre: Dot-separated pre-release identifiers ("" when none).
        build: Dot-separated build metadata ("" when none).
    """
    major: int
    minor: int
    patch: int
    pre: str = ""
    build: str = field(default="", compare=False)

    MAX_COMPONENT = (1 << 64) - 1

    @classmethod
    def parse(cls, text: str) -> "Version":
        """
        Parse "MAJOR.MINOR.PATCH[-pre][+build]".

        Raises:
            ValueError: If the text is not a valid semantic version.
        """
        match = _VERSION_RE.fullmatch(text)
        if match is None:
            raise ValueError("expected a semantic version MAJOR.MINOR.PATCH")
        major, minor, patch = (int(match.group(part)) for part in ("major", "minor", "patch"))
        if max(major, minor, patch) > cls.MAX_COMPONENT:
            raise ValueError(f"version component exceeds the 64-bit maximum {cls.MAX_COMPONENT}")
        return cls(
            major=major,
            minor=minor,
            patch=patch,
            pre=match.group("pre") or "",
            build=match.group("build") or "",
        )

    def _precedence(self) -> Tuple:
        if not self.pre:
            # A release outranks any of its pre-releases.
            return (self.major, self.minor, self.patch, 1, ())
        identifiers = tuple(
            (0, int(part), "") if part.isdigit() else (1, 0, part)
            for part in self.pre.split(".")
        )
        return (self.major, self.minor, self.patch, 0, identifiers)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._precedence() < other._precedence()

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.pre:
            text += f"-{self.pre}"
        if self.build:
            text += f"+{self.build}"
        return text


class VersionParser:
    """Parse a variable into a Version."""

    accepts_missing = False

    def parse(self, raw: Optional[str]) -> Version:
        return Version.parse(raw or "")

    def __repr__(self) -> str:
        return "VersionParser()"


# Shared instances. USIZE and U64 are distinct names for the same rule so
# field declarations read like the type they produce.
USIZE = UnsignedInt(bits=64)
U64 = UnsignedInt(bits=64)
BOOLEAN = EnvVarBoolean()
VERSION = VersionParser()
