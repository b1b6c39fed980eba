"""Exception types raised by the middleware."""

from __future__ import annotations


class MiddlewareError(Exception):
    """Base class for all middleware errors."""


class ParseError(MiddlewareError, ValueError):
    """File content could not be parsed as JSON (or front-matter as YAML)."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(f"{path}: {message}")


class RegistrationError(MiddlewareError, TypeError):
    """The host object cannot register the middleware's hooks."""


class ConfigError(MiddlewareError, ValueError):
    """An option value is missing, unknown, or malformed."""
