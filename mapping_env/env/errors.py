"""
Error types raised while loading configuration from environment variables.

**Conceptual**: Loading configuration can fail in exactly two ways: a required
variable is not set at all, or it is set to text that its declared parser
rejects. Each failure names the variable so the operator knows what to fix.

Both errors derive from ValueError so that callers which already guard
settings construction with `except ValueError` keep working unchanged.
"""

from typing import Optional


class EnvVarError(ValueError):
    """
    Base exception for environment variable configuration errors.

    Attributes:
        name: Name of the environment variable that caused the failure.
    """

    def __init__(self, name: str, message: str):
        super().__init__(message)
        self.name = name


class MissingVariable(EnvVarError):
    """
    Raised when a required variable is absent and declares no default.

    **Recovery**: Set the variable in the process environment or in .env.
    """

    def __init__(self, name: str):
        super().__init__(name, f"{name} is required but not set")


class InvalidFormat(EnvVarError):
    """
    Raised when a variable is set but its text fails the declared parser.

    Covers wrong integer syntax, a disallowed `_` separator, an unrecognized
    boolean token and a malformed version.

    Attributes:
        name: Name of the environment variable.
        raw_text: The text that was rejected (or the declared default literal
                  when the default itself fails to parse).
        reason: Short explanation from the parser, if any.
    """

    def __init__(self, name: str, raw_text: str, reason: Optional[str] = None):
        message = f"{name} has an invalid value: {raw_text!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(name, message)
        self.raw_text = raw_text
        self.reason = reason
