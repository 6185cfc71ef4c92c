"""
Exception classes for the page generator.

All exceptions inherit from ParkourError and provide structured
error information with codes, messages, and optional details.
Configuration source errors never reach a request: the source chain
absorbs them and falls through to the next source.
"""

from typing import Optional


class ParkourError(Exception):
    """Base exception for all page generator errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class SettingsError(ParkourError):
    """Raised when runtime settings are invalid (startup only)."""

    pass


class ConfigSourceError(ParkourError):
    """Raised when a configuration source cannot produce a record."""

    pass


class KVStoreError(ConfigSourceError):
    """Raised when the remote key-value store faults (network, HTTP, payload)."""

    pass


class EnvironmentConfigError(ConfigSourceError):
    """Raised when a <PREFIX>_CONFIG environment variable is not a JSON object."""

    pass


class LocalOverrideError(ConfigSourceError):
    """Raised when the local override file cannot be read or parsed."""

    pass
