from __future__ import annotations


class CodeLensError(Exception):
    """Base class for errors raised by codelens_core."""


class ValidationError(CodeLensError):
    """Submitted code was missing or blank. Never reaches the generator."""


class GenerationError(CodeLensError):
    """The review generator failed or returned something unusable.

    ``status`` is the upstream HTTP status code when the provider reported one.
    """

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.message = message
        self.status = status


class ConfigError(CodeLensError):
    """Required configuration is missing or invalid."""
