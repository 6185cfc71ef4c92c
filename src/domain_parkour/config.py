"""
Runtime settings for the page generator.

This module defines the settings structures used to wire the system
together: the remote KV store, the local override file, development
hostnames, logging and the development server. Settings come from the
process environment; per-domain page configuration does not live here.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional
from urllib.parse import urlparse

from .exceptions import SettingsError


DEFAULT_KV_BASE_URL = "https://api.cloudflare.com/client/v4"
DEFAULT_LOCAL_CONFIG = Path("config.dev.local.json")
BUILTIN_DEV_HOSTNAMES = ("localhost", "127.0.0.1", "::1")

LOG_LEVELS = ("debug", "info", "warn", "error")
LOG_FORMATS = ("json", "text", "both")


@dataclass
class KVStoreSettings:
    """Cloudflare Workers KV namespace accessed through the REST API."""

    account_id: str
    namespace_id: str
    api_token: str
    base_url: str = DEFAULT_KV_BASE_URL
    timeout_seconds: float = 5.0


@dataclass
class LocalOverrideSettings:
    """Development preset file and the hostnames allowed to use it."""

    path: Path = DEFAULT_LOCAL_CONFIG
    dev_hostnames: tuple[str, ...] = BUILTIN_DEV_HOSTNAMES


@dataclass
class LoggingSettings:
    """Logging configuration."""

    level: str = "info"
    output_format: str = "text"  # 'json', 'text', 'both'


@dataclass
class ServerSettings:
    """Bind address for the development server."""

    host: str = "127.0.0.1"
    port: int = 8787


@dataclass
class Settings:
    """Main settings object combining all sub-settings."""

    kv: Optional[KVStoreSettings] = None
    kv_file: Optional[Path] = None
    local_overrides: LocalOverrideSettings = field(default_factory=LocalOverrideSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    server: ServerSettings = field(default_factory=ServerSettings)


def _float_env(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise SettingsError(
            code="invalid_number",
            message=f"{name} must be a number",
            details={"variable": name, "value": raw},
        )


def _int_env(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise SettingsError(
            code="invalid_number",
            message=f"{name} must be an integer",
            details={"variable": name, "value": raw},
        )


def _choice_env(
    environ: Mapping[str, str], name: str, default: str, choices: tuple[str, ...]
) -> str:
    value = (environ.get(name) or default).strip().lower()
    if value not in choices:
        raise SettingsError(
            code="invalid_choice",
            message=f"{name} must be one of {', '.join(choices)}",
            details={"variable": name, "value": value},
        )
    return value


def _load_kv_settings(environ: Mapping[str, str]) -> Optional[KVStoreSettings]:
    names = ("PARKOUR_KV_ACCOUNT_ID", "PARKOUR_KV_NAMESPACE_ID", "PARKOUR_KV_API_TOKEN")
    values = [(environ.get(name) or "").strip() for name in names]
    if not any(values):
        return None
    if not all(values):
        missing = [name for name, value in zip(names, values) if not value]
        raise SettingsError(
            code="incomplete_kv_settings",
            message="KV store settings are incomplete",
            details={"missing": missing},
        )

    base_url = (environ.get("PARKOUR_KV_BASE_URL") or DEFAULT_KV_BASE_URL).rstrip("/")
    if urlparse(base_url).scheme.lower() != "https":
        raise SettingsError(
            code="insecure_kv_base_url",
            message=f"KV base URL must use HTTPS: {base_url}",
            details={"base_url": base_url},
        )

    account_id, namespace_id, api_token = values
    return KVStoreSettings(
        account_id=account_id,
        namespace_id=namespace_id,
        api_token=api_token,
        base_url=base_url,
        timeout_seconds=_float_env(environ, "PARKOUR_KV_TIMEOUT", 5.0),
    )


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from environment variables.

    Args:
        environ: Variable mapping (defaults to os.environ)

    Returns:
        Settings populated from PARKOUR_* variables

    Raises:
        SettingsError: If a variable holds an invalid value
    """
    if environ is None:
        environ = os.environ

    extra_hosts = [
        host.strip().lower()
        for host in (environ.get("PARKOUR_DEV_HOSTNAMES") or "").split(",")
        if host.strip()
    ]
    dev_hostnames = tuple(dict.fromkeys(BUILTIN_DEV_HOSTNAMES + tuple(extra_hosts)))

    local_path = environ.get("PARKOUR_LOCAL_CONFIG")
    kv_file = environ.get("PARKOUR_KV_FILE")

    return Settings(
        kv=_load_kv_settings(environ),
        kv_file=Path(kv_file) if kv_file else None,
        local_overrides=LocalOverrideSettings(
            path=Path(local_path) if local_path else DEFAULT_LOCAL_CONFIG,
            dev_hostnames=dev_hostnames,
        ),
        logging=LoggingSettings(
            level=_choice_env(environ, "PARKOUR_LOG_LEVEL", "info", LOG_LEVELS),
            output_format=_choice_env(environ, "PARKOUR_LOG_FORMAT", "text", LOG_FORMATS),
        ),
        server=ServerSettings(
            host=environ.get("PARKOUR_HOST") or "127.0.0.1",
            port=_int_env(environ, "PARKOUR_PORT", 8787),
        ),
    )
