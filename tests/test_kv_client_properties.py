"""
Property-based tests for the KV store clients.

The Cloudflare client is exercised against httpx.MockTransport so no
network access is needed.
"""

import asyncio
import json
import tempfile
from pathlib import Path

import httpx
from hypothesis import given, settings
from hypothesis import strategies as st

from domain_parkour.config import KVStoreSettings
from domain_parkour.exceptions import KVStoreError
from domain_parkour.kv_client import DEFAULT_KEY, CloudflareKVClient, KVStore, StaticKVStore


def kv_settings(base_url: str = "https://kv.example.test/client/v4") -> KVStoreSettings:
    return KVStoreSettings(
        account_id="acct",
        namespace_id="ns",
        api_token="secret-token",
        base_url=base_url,
    )


def client_for(handler) -> CloudflareKVClient:
    return CloudflareKVClient(kv_settings(), transport=httpx.MockTransport(handler))


class TestCloudflareKVClientProperty:
    """Status codes and payloads map onto values, absence or KVStoreError."""

    def test_returns_decoded_value(self) -> None:
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"mode": "landing"})

        value = asyncio.run(client_for(handler).get("example.com"))

        assert value == {"mode": "landing"}
        assert seen[0].headers["authorization"] == "Bearer secret-token"
        assert seen[0].url.path == (
            "/client/v4/accounts/acct/storage/kv/namespaces/ns/values/example.com"
        )

    def test_missing_key_is_none(self) -> None:
        client = client_for(lambda request: httpx.Response(404, json={"success": False}))
        assert asyncio.run(client.get("example.com")) is None

    @given(status=st.sampled_from([400, 401, 403, 429, 500, 502, 503]))
    @settings(max_examples=20)
    def test_error_status_raises(self, status: int) -> None:
        client = client_for(lambda request: httpx.Response(status))
        try:
            asyncio.run(client.get("example.com"))
            assert False, "Should have raised KVStoreError"
        except KVStoreError as e:
            assert e.code == "http_error"
            assert e.details["status_code"] == status

    def test_invalid_json_raises(self) -> None:
        client = client_for(lambda request: httpx.Response(200, content=b"{not json"))
        try:
            asyncio.run(client.get("example.com"))
            assert False, "Should have raised KVStoreError"
        except KVStoreError as e:
            assert e.code == "parse_error"

    def test_network_failure_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        try:
            asyncio.run(client_for(handler).get("example.com"))
            assert False, "Should have raised KVStoreError"
        except KVStoreError as e:
            assert e.code == "network_error"

    def test_timeout_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("too slow", request=request)

        try:
            asyncio.run(client_for(handler).get("example.com"))
            assert False, "Should have raised KVStoreError"
        except KVStoreError as e:
            assert e.code == "timeout"

    def test_shared_client_in_context(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            key = request.url.path.rsplit("/", 1)[-1]
            return httpx.Response(200, json={"key": key})

        async def run():
            async with client_for(handler) as client:
                return [await client.get("a.example"), await client.get(DEFAULT_KEY)]

        assert asyncio.run(run()) == [{"key": "a.example"}, {"key": DEFAULT_KEY}]

    @given(scheme=st.sampled_from(["http", "ftp", "ws"]))
    @settings(max_examples=10)
    def test_https_is_enforced(self, scheme: str) -> None:
        try:
            CloudflareKVClient(kv_settings(f"{scheme}://kv.example.test"))
            assert False, f"Should have rejected {scheme}"
        except KVStoreError as e:
            assert e.code == "tls_error"

    def test_key_is_quoted(self) -> None:
        client = CloudflareKVClient(kv_settings())
        assert client.value_url("a/b c").endswith("/values/a%2Fb%20c")

    def test_satisfies_protocol(self) -> None:
        assert isinstance(CloudflareKVClient(kv_settings()), KVStore)
        assert isinstance(StaticKVStore(), KVStore)


class TestStaticKVStoreProperty:
    """The in-memory store hands out copies so callers cannot mutate it."""

    @given(value=st.dictionaries(st.text(max_size=5), st.integers(), max_size=5))
    @settings(max_examples=50)
    def test_returns_copies(self, value: dict) -> None:
        store = StaticKVStore({"example.com": value})
        first = asyncio.run(store.get("example.com"))
        assert first == value
        first["mutated"] = 1
        assert asyncio.run(store.get("example.com")) == value

    def test_from_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "kv.json"
            path.write_text(json.dumps({DEFAULT_KEY: {"title": "Fallback"}}), encoding="utf-8")
            store = StaticKVStore.from_file(path)
        assert asyncio.run(store.get(DEFAULT_KEY)) == {"title": "Fallback"}
        assert asyncio.run(store.get("missing")) is None

    @given(content=st.sampled_from([b"[]", b"42", b"{broken", b'{"_default": "\xff"}']))
    @settings(max_examples=10)
    def test_from_invalid_file(self, content: bytes) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "kv.json"
            path.write_bytes(content)
            try:
                StaticKVStore.from_file(path)
                assert False, "Should have raised KVStoreError"
            except KVStoreError as e:
                assert e.code == "parse_error"

    def test_from_missing_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            try:
                StaticKVStore.from_file(Path(tmp) / "absent.json")
                assert False, "Should have raised KVStoreError"
            except KVStoreError as e:
                assert e.code == "io_error"
