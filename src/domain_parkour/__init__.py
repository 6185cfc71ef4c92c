"""
Domain Parkour - hostname-aware parking, coming-soon and landing pages.

This package resolves a per-request page configuration from layered
sources (local development presets, a remote KV store, environment
variables and built-in defaults) and renders it into one of three
page templates.
"""

__version__ = "0.1.0"
__author__ = "Domain Parkour Team"

from domain_parkour.exceptions import (
    ParkourError,
    SettingsError,
    ConfigSourceError,
    KVStoreError,
    EnvironmentConfigError,
    LocalOverrideError,
)
from domain_parkour.enums import (
    PageMode,
    ConfigSource,
    LogLevel,
)
from domain_parkour.models import (
    Feature,
    Link,
    ConfigurationRecord,
    DerivedFields,
    Preset,
    SourceResult,
    ResolvedConfig,
    PageResponse,
)
from domain_parkour.config import (
    KVStoreSettings,
    LocalOverrideSettings,
    LoggingSettings,
    ServerSettings,
    Settings,
    load_settings,
)
from domain_parkour.hostname import (
    NormalizedHostname,
    normalize_hostname,
    is_ipv4_literal,
)
from domain_parkour.derived import (
    derive_fields,
    parse_iso_datetime,
)
from domain_parkour.event_logger import (
    EventLogger,
    LogEntry,
)
from domain_parkour.kv_client import (
    KVStore,
    CloudflareKVClient,
    StaticKVStore,
)
from domain_parkour.sources import (
    LocalOverrideSource,
    KVSource,
    EnvironmentSource,
    ConfigSourceChain,
    builtin_default_record,
)
from domain_parkour.resolver import (
    ConfigResolver,
    merge_record,
    build_env_key_map,
)
from domain_parkour.countdown import (
    Countdown,
    CountdownState,
)
from domain_parkour.dispatcher import (
    dispatch,
    select_renderer,
)
from domain_parkour.handler import (
    PageHandler,
    create_page_handler,
)

__all__ = [
    # Exceptions
    "ParkourError",
    "SettingsError",
    "ConfigSourceError",
    "KVStoreError",
    "EnvironmentConfigError",
    "LocalOverrideError",
    # Enums
    "PageMode",
    "ConfigSource",
    "LogLevel",
    # Models
    "Feature",
    "Link",
    "ConfigurationRecord",
    "DerivedFields",
    "Preset",
    "SourceResult",
    "ResolvedConfig",
    "PageResponse",
    # Settings
    "KVStoreSettings",
    "LocalOverrideSettings",
    "LoggingSettings",
    "ServerSettings",
    "Settings",
    "load_settings",
    # Hostname
    "NormalizedHostname",
    "normalize_hostname",
    "is_ipv4_literal",
    # Derived fields
    "derive_fields",
    "parse_iso_datetime",
    # Logging
    "EventLogger",
    "LogEntry",
    # KV store
    "KVStore",
    "CloudflareKVClient",
    "StaticKVStore",
    # Sources
    "LocalOverrideSource",
    "KVSource",
    "EnvironmentSource",
    "ConfigSourceChain",
    "builtin_default_record",
    # Resolver
    "ConfigResolver",
    "merge_record",
    "build_env_key_map",
    # Countdown
    "Countdown",
    "CountdownState",
    # Dispatch
    "dispatch",
    "select_renderer",
    # Handler
    "PageHandler",
    "create_page_handler",
]
