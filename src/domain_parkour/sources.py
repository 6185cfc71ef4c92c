"""
Configuration sources.

Each source turns a normalized hostname into a raw configuration record
(camelCase JSON object) or reports absence. Sources are consulted in a
fixed priority order by ConfigSourceChain:

1. Local override file (development hostnames only)
2. Remote KV store, exact hostname key
3. Remote KV store, "_default" key
4. <PREFIX>_CONFIG environment variable holding a JSON object
5. Built-in default record

Source faults are logged and treated as absence; the chain always
produces a record.
"""

import json
from pathlib import Path
from typing import Any, Mapping, Optional

from .config import LocalOverrideSettings
from .enums import ConfigSource, LogLevel, PageMode
from .event_logger import EventLogger
from .exceptions import EnvironmentConfigError, KVStoreError, LocalOverrideError
from .hostname import NormalizedHostname
from .kv_client import DEFAULT_KEY, KVStore
from .models import DEFAULT_ACCENT_COLOR, Preset, SourceResult


def builtin_default_record(hostname: str) -> dict:
    """Lowest-priority record. Holds only generic, non-sensitive values."""
    return {
        "domain": hostname,
        "mode": PageMode.PARKING.value,
        "title": "Premium Domain For Sale",
        "description": "This premium domain is available for purchase.",
        "registrationDate": None,
        "salePrice": None,
        "contactEmail": None,
        "accentColor": DEFAULT_ACCENT_COLOR,
        "launchDate": None,
        "tagline": None,
        "features": [],
        "socialLinks": {},
        "subtitle": None,
        "links": [],
    }


def _with_domain(hostname: str, data: dict) -> dict:
    # Stored values may override "domain"; the hostname is only the fallback.
    return {"domain": hostname, **data}


def parse_presets(raw: Any) -> tuple[Preset, ...]:
    """
    Turn the local override file content into named presets.

    Accepts a JSON array of preset objects or a single object. Preset names
    come from "name", then "domainTitle", then the 1-based position.
    """
    items = raw if isinstance(raw, list) else [raw]
    presets = []
    for position, item in enumerate(items, start=1):
        if not isinstance(item, dict):
            raise LocalOverrideError(
                code="invalid_preset",
                message=f"Preset #{position} is not a JSON object",
                details={"position": position, "type": type(item).__name__},
            )
        data = {key: value for key, value in item.items() if key != "name"}
        name = item.get("name") or item.get("domainTitle") or f"Preset {position}"
        presets.append(Preset(name=str(name), data=data))
    return tuple(presets)


class LocalOverrideSource:
    """
    Developer-maintained presets, active only for development hostnames.

    The file is read on every lookup so edits show up on the next reload.
    """

    COMPONENT = "local_overrides"

    def __init__(
        self,
        settings: LocalOverrideSettings,
        logger: Optional[EventLogger] = None,
    ) -> None:
        self._path = Path(settings.path)
        self._dev_hostnames = frozenset(h.lower() for h in settings.dev_hostnames)
        self._logger = logger

    def is_dev_host(self, hostname: str) -> bool:
        return hostname.lower() in self._dev_hostnames

    def load_presets(self) -> tuple[Preset, ...]:
        """
        Read and parse the override file.

        Returns:
            The presets in file order (empty if the file does not exist)

        Raises:
            LocalOverrideError: If the file is unreadable or malformed
        """
        if not self._path.exists():
            return ()
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except json.JSONDecodeError as e:
            raise LocalOverrideError(
                code="parse_error",
                message=f"Failed to parse local override file: {e}",
                details={"file_path": str(self._path)},
            ) from e
        except UnicodeDecodeError as e:
            raise LocalOverrideError(
                code="parse_error",
                message=f"Local override file is not valid UTF-8: {e}",
                details={"file_path": str(self._path)},
            ) from e
        except OSError as e:
            raise LocalOverrideError(
                code="io_error",
                message=f"Failed to read local override file: {e}",
                details={"file_path": str(self._path)},
            ) from e
        return parse_presets(raw)

    async def lookup(
        self, host: NormalizedHostname, environment: Mapping[str, str]
    ) -> Optional[SourceResult]:
        if not self.is_dev_host(host.canonical):
            return None

        try:
            presets = self.load_presets()
        except LocalOverrideError as e:
            if self._logger:
                self._logger.log(
                    LogLevel.WARN,
                    self.COMPONENT,
                    "Local override file invalid, falling back to KV/env",
                    {"file_path": str(self._path), "error": e.message},
                )
            return None

        if not presets:
            if self._logger:
                self._logger.log(
                    LogLevel.INFO,
                    self.COMPONENT,
                    "No local overrides, falling back to KV/env",
                    {"file_path": str(self._path)},
                )
            return None

        if self._logger:
            self._logger.log(
                LogLevel.INFO,
                self.COMPONENT,
                "Using local override file",
                {"file_path": str(self._path), "presets": len(presets)},
            )
        return SourceResult(
            source=ConfigSource.LOCAL_OVERRIDE,
            data=_with_domain(host.canonical, presets[0].data),
            presets=presets,
        )


class KVSource:
    """Remote KV lookup: exact hostname first, then the sentinel default key."""

    COMPONENT = "kv_store"

    def __init__(
        self,
        store: Optional[KVStore],
        logger: Optional[EventLogger] = None,
    ) -> None:
        self._store = store
        self._logger = logger

    async def lookup(
        self, host: NormalizedHostname, environment: Mapping[str, str]
    ) -> Optional[SourceResult]:
        if self._store is None:
            return None

        try:
            exact = await self._store.get(host.canonical)
            if self._usable(exact, host.canonical):
                return SourceResult(
                    source=ConfigSource.KV_EXACT,
                    data=_with_domain(host.canonical, exact),
                )

            fallback = await self._store.get(DEFAULT_KEY)
            if self._usable(fallback, DEFAULT_KEY):
                return SourceResult(
                    source=ConfigSource.KV_DEFAULT,
                    data=_with_domain(host.canonical, fallback),
                )
        except KVStoreError as e:
            if self._logger:
                self._logger.log_error(
                    self.COMPONENT,
                    "Error fetching from KV",
                    error=e,
                    additional_data={"hostname": host.canonical},
                )
        return None

    def _usable(self, value: Any, key: str) -> bool:
        if value is None:
            return False
        if isinstance(value, dict):
            return True
        if self._logger:
            self._logger.log(
                LogLevel.WARN,
                self.COMPONENT,
                "Ignoring KV value that is not a JSON object",
                {"key": key, "type": type(value).__name__},
            )
        return False


class EnvironmentSource:
    """Structured override held in one <PREFIX>_CONFIG variable."""

    COMPONENT = "environment"

    def __init__(self, logger: Optional[EventLogger] = None) -> None:
        self._logger = logger

    @staticmethod
    def parse_blob(name: str, raw: str) -> dict:
        """
        Decode a <PREFIX>_CONFIG value.

        Raises:
            EnvironmentConfigError: If the value is not a JSON object
        """
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError as e:
            near = raw[e.pos] if e.pos < len(raw) else ""
            raise EnvironmentConfigError(
                code="parse_error",
                message=f"Error parsing {name}: {e.msg}",
                details={
                    "variable": name,
                    "length": len(raw),
                    "line": e.lineno,
                    "column": e.colno,
                    "position": e.pos,
                    "char_at_position": near,
                },
            ) from e
        if not isinstance(parsed, dict):
            raise EnvironmentConfigError(
                code="not_an_object",
                message=f"{name} must hold a JSON object",
                details={"variable": name, "type": type(parsed).__name__},
            )
        return parsed

    async def lookup(
        self, host: NormalizedHostname, environment: Mapping[str, str]
    ) -> Optional[SourceResult]:
        name = host.env_key("CONFIG")
        raw = environment.get(name)

        if self._logger:
            self._logger.log(
                LogLevel.DEBUG,
                self.COMPONENT,
                "Environment config lookup",
                {"hostname": host.canonical, "env_prefix": host.env_prefix, "exists": bool(raw)},
            )
        if not raw:
            return None

        try:
            parsed = self.parse_blob(name, raw)
        except EnvironmentConfigError as e:
            if self._logger:
                self._logger.log_error(self.COMPONENT, e.message, error=e)
            return None

        return SourceResult(
            source=ConfigSource.ENVIRONMENT,
            data=_with_domain(host.canonical, parsed),
        )


class ConfigSourceChain:
    """Consults the sources in priority order; the first record wins."""

    def __init__(
        self,
        local_overrides: Optional[LocalOverrideSource] = None,
        kv: Optional[KVSource] = None,
        environment: Optional[EnvironmentSource] = None,
        logger: Optional[EventLogger] = None,
    ) -> None:
        self._sources = [
            source for source in (local_overrides, kv, environment or EnvironmentSource(logger))
            if source is not None
        ]
        self._logger = logger

    async def lookup(
        self, host: NormalizedHostname, environment: Mapping[str, str]
    ) -> SourceResult:
        for source in self._sources:
            result = await source.lookup(host, environment)
            if result is not None:
                self._log_selected(host, result.source)
                return result

        self._log_selected(host, ConfigSource.BUILTIN_DEFAULT)
        return SourceResult(
            source=ConfigSource.BUILTIN_DEFAULT,
            data=builtin_default_record(host.canonical),
        )

    def _log_selected(self, host: NormalizedHostname, source: ConfigSource) -> None:
        if self._logger:
            self._logger.log(
                LogLevel.DEBUG,
                "sources",
                "Configuration source selected",
                {"hostname": host.canonical, "source": source.value},
            )
