"""
Request handler.

Runs the per-request pipeline: hostname extraction, configuration
resolution, template dispatch, and response headers. Configuration
problems never fail a request; the worst case is the built-in default
parking page.
"""

from datetime import datetime
from typing import Mapping, Optional
from urllib.parse import parse_qs, urlsplit

import httpx

from .config import Settings
from .dispatcher import dispatch
from .enums import LogLevel
from .event_logger import EventLogger
from .exceptions import KVStoreError
from .kv_client import CloudflareKVClient, KVStore, StaticKVStore
from .models import PageResponse
from .resolver import ConfigResolver
from .sources import ConfigSourceChain, EnvironmentSource, KVSource, LocalOverrideSource
from .templates.base import PRESET_COOKIE, PRESET_QUERY_PARAM


CONTENT_TYPE = "text/html;charset=UTF-8"
CACHE_CONTROL = "public, max-age=3600"


def extract_hostname(url: str) -> str:
    """Hostname from the URL authority (lowercase, without port)."""
    return urlsplit(url).hostname or ""


def extract_preset_selector(
    url: str, cookies: Optional[Mapping[str, str]] = None
) -> Optional[str]:
    """Preset index requested by query parameter, else by the stored cookie."""
    values = parse_qs(urlsplit(url).query).get(PRESET_QUERY_PARAM)
    if values:
        return values[0]
    if cookies:
        return cookies.get(PRESET_COOKIE)
    return None


class PageHandler:
    """Turns one HTTP GET into one rendered page."""

    COMPONENT = "handler"

    def __init__(
        self,
        resolver: ConfigResolver,
        environment: Mapping[str, str],
        logger: Optional[EventLogger] = None,
    ) -> None:
        """
        Initialize the handler.

        Args:
            resolver: Configuration resolver
            environment: Flat environment table for overrides
            logger: Optional event logger
        """
        self._resolver = resolver
        self._environment = environment
        self._logger = logger

    @property
    def resolver(self) -> ConfigResolver:
        return self._resolver

    @property
    def environment(self) -> Mapping[str, str]:
        return self._environment

    async def handle(
        self,
        url: str,
        cookies: Optional[Mapping[str, str]] = None,
        now: Optional[datetime] = None,
    ) -> PageResponse:
        """
        Render the page for a request URL.

        Args:
            url: Full request URL (hostname is taken from its authority)
            cookies: Request cookies (for the stored preset choice)
            now: Evaluation instant for derived fields and the countdown
        """
        hostname = extract_hostname(url)
        resolved = await self._resolver.resolve(
            hostname,
            self._environment,
            preset_selector=extract_preset_selector(url, cookies),
            now=now,
        )
        record = resolved.record
        body = dispatch(record, resolved.presets, resolved.preset_index, now=now)

        if self._logger:
            self._logger.log(
                LogLevel.INFO,
                self.COMPONENT,
                "Page served",
                {
                    "hostname": hostname,
                    "mode": record.page_mode.value,
                    "source": resolved.source.value,
                },
            )

        return PageResponse(
            body=body,
            headers={
                "content-type": CONTENT_TYPE,
                "cache-control": CACHE_CONTROL,
                "x-served-domain": hostname,
                "x-page-mode": record.page_mode.value,
            },
        )


def create_kv_store(
    settings: Settings,
    logger: Optional[EventLogger] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Optional[KVStore]:
    """
    Build the remote store named by the settings, if any.

    A KV file that cannot be loaded is logged and treated as no store.
    """
    if settings.kv is not None:
        return CloudflareKVClient(settings.kv, transport=transport)
    if settings.kv_file is not None:
        try:
            return StaticKVStore.from_file(settings.kv_file)
        except KVStoreError as e:
            if logger:
                logger.log_error("kv_store", "KV file unavailable", error=e)
    return None


def create_page_handler(
    settings: Settings,
    environment: Mapping[str, str],
    logger: Optional[EventLogger] = None,
    kv_store: Optional[KVStore] = None,
) -> PageHandler:
    """
    Wire sources, resolver and handler from settings.

    Args:
        settings: Runtime settings
        environment: Flat environment table for overrides
        logger: Optional event logger
        kv_store: Store to use instead of the one named by the settings
    """
    store = kv_store if kv_store is not None else create_kv_store(settings, logger)
    chain = ConfigSourceChain(
        local_overrides=LocalOverrideSource(settings.local_overrides, logger),
        kv=KVSource(store, logger),
        environment=EnvironmentSource(logger),
        logger=logger,
    )
    return PageHandler(ConfigResolver(chain, logger), environment, logger)
