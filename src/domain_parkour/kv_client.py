"""
Remote key-value store clients.

Page configuration is stored out-of-band by operators in a namespaced
key-value store, keyed by exact hostname or the sentinel key "_default".
This module provides the read-only store interface, an async client for
the Cloudflare Workers KV REST API, and an in-memory store (optionally
loaded from a JSON file) for local operation and tests.
"""

import copy
import json
from abc import abstractmethod
from pathlib import Path
from typing import Any, Optional, Protocol, runtime_checkable
from urllib.parse import quote, urlparse

import httpx

from .config import KVStoreSettings
from .exceptions import KVStoreError


DEFAULT_KEY = "_default"


@runtime_checkable
class KVStore(Protocol):
    """Protocol defining the read interface of a KV namespace."""

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """
        Fetch and JSON-decode the value stored under a key.

        Args:
            key: Exact hostname or DEFAULT_KEY

        Returns:
            The decoded value, or None if the key does not exist

        Raises:
            KVStoreError: On transport, HTTP or payload faults
        """
        ...


class CloudflareKVClient:
    """
    Async client for a Cloudflare Workers KV namespace.

    Usable as an async context manager to share one connection pool
    across lookups; without one, each lookup opens a short-lived client.
    """

    def __init__(
        self,
        settings: KVStoreSettings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the KV client.

        Args:
            settings: Account, namespace, token and endpoint settings
            transport: Optional httpx transport (used for testing)

        Raises:
            KVStoreError: If the endpoint does not use HTTPS
        """
        parsed = urlparse(settings.base_url)
        if parsed.scheme.lower() != "https":
            raise KVStoreError(
                code="tls_error",
                message=f"KV endpoint must use HTTPS: {settings.base_url}",
                details={"base_url": settings.base_url, "scheme": parsed.scheme},
            )

        self._settings = settings
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "CloudflareKVClient":
        self._client = self._build_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def _build_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            verify=True,
            timeout=httpx.Timeout(self._settings.timeout_seconds),
            headers={"Authorization": f"Bearer {self._settings.api_token}"},
            transport=self._transport,
        )

    def value_url(self, key: str) -> str:
        """URL of the value endpoint for a key."""
        s = self._settings
        return (
            f"{s.base_url.rstrip('/')}/accounts/{s.account_id}"
            f"/storage/kv/namespaces/{s.namespace_id}/values/{quote(key, safe='')}"
        )

    async def get(self, key: str) -> Optional[Any]:
        """Fetch and decode a JSON value; None when the key is missing."""
        if self._client is not None:
            return await self._fetch(self._client, key)
        async with self._build_client() as client:
            return await self._fetch(client, key)

    async def _fetch(self, client: httpx.AsyncClient, key: str) -> Optional[Any]:
        url = self.value_url(key)
        try:
            response = await client.get(url)
        except httpx.TimeoutException as e:
            raise KVStoreError(
                code="timeout",
                message=f"KV lookup timed out for key {key!r}",
                details={"key": key, "url": url},
            ) from e
        except httpx.HTTPError as e:
            raise KVStoreError(
                code="network_error",
                message=f"KV lookup failed for key {key!r}: {e}",
                details={"key": key, "url": url},
            ) from e

        if response.status_code == 404:
            return None
        if response.status_code != 200:
            raise KVStoreError(
                code="http_error",
                message=f"KV lookup for key {key!r} returned HTTP {response.status_code}",
                details={"key": key, "status_code": response.status_code},
            )

        try:
            return response.json()
        except ValueError as e:
            raise KVStoreError(
                code="parse_error",
                message=f"KV value for key {key!r} is not valid JSON",
                details={"key": key, "length": len(response.content)},
            ) from e


class StaticKVStore:
    """In-memory KV namespace, optionally loaded from a JSON object file."""

    def __init__(self, values: Optional[dict[str, Any]] = None) -> None:
        self._values = dict(values or {})

    @classmethod
    def from_file(cls, path: Path) -> "StaticKVStore":
        """
        Load a namespace from a JSON file mapping keys to values.

        Raises:
            KVStoreError: If the file cannot be read or is not a JSON object
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise KVStoreError(
                code="parse_error",
                message=f"Failed to parse KV file: {e}",
                details={"file_path": str(path)},
            ) from e
        except UnicodeDecodeError as e:
            raise KVStoreError(
                code="parse_error",
                message=f"KV file is not valid UTF-8: {e}",
                details={"file_path": str(path)},
            ) from e
        except OSError as e:
            raise KVStoreError(
                code="io_error",
                message=f"Failed to read KV file: {e}",
                details={"file_path": str(path)},
            ) from e

        if not isinstance(data, dict):
            raise KVStoreError(
                code="parse_error",
                message="KV file must contain a JSON object",
                details={"file_path": str(path)},
            )
        return cls(data)

    async def get(self, key: str) -> Optional[Any]:
        value = self._values.get(key)
        return copy.deepcopy(value) if value is not None else None
