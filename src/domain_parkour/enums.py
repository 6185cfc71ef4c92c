"""
Enumeration types for the page generator.

These enums provide type-safe constants for page modes, configuration
sources and log levels throughout the system.
"""

from enum import Enum


class PageMode(Enum):
    """Page template selected for a request."""

    PARKING = "parking"
    COMING_SOON = "coming-soon"
    LANDING = "landing"

    @classmethod
    def from_value(cls, value: object) -> "PageMode":
        """
        Map a raw mode value to a PageMode.

        Anything that is not one of the two non-default modes is parking.
        """
        if value == cls.COMING_SOON.value:
            return cls.COMING_SOON
        if value == cls.LANDING.value:
            return cls.LANDING
        return cls.PARKING


class ConfigSource(Enum):
    """Where the base configuration record of a request came from."""

    LOCAL_OVERRIDE = "local_override"
    KV_EXACT = "kv_exact"
    KV_DEFAULT = "kv_default"
    ENVIRONMENT = "environment"
    BUILTIN_DEFAULT = "builtin_default"


class LogLevel(Enum):
    """Logging severity levels."""

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"

    @property
    def rank(self) -> int:
        return _LEVEL_RANK[self]


_LEVEL_RANK = {
    LogLevel.DEBUG: 10,
    LogLevel.INFO: 20,
    LogLevel.WARN: 30,
    LogLevel.ERROR: 40,
}
