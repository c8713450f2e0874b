"""Exception taxonomy for vizspec."""

from __future__ import annotations


class VizspecError(Exception):
    """Base class for recoverable vizspec errors."""


class SpecParseError(VizspecError, ValueError):
    """Raw specification text could not be coerced into a JSON value.

    Recoverable per occurrence: the render pass degrades that occurrence to an
    inline error and keeps going.
    """

    def __init__(self, message: str, *, text: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.text = text

    @property
    def display_text(self) -> str:
        return f"Syntax error in graph specification: {self.message}"


class ConfigError(VizspecError, ValueError):
    """A host configuration value has the wrong shape."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"invalid config value for {key!r}: {reason}")
        self.key = key
        self.reason = reason


class NeverThrown(RuntimeError):
    """Raised when a path marked unreachable by `never()` is reached."""

    def __init__(self, message: str, *, env: dict[str, object] | None = None):
        super().__init__(message)
        self.env = dict(env or {})
