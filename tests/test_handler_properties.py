"""
Property-based tests for the request handler and the HTTP surface.
"""

import asyncio
import json
import tempfile
from datetime import datetime, timezone
from io import StringIO
from pathlib import Path
from typing import Optional

from fastapi.testclient import TestClient
from hypothesis import given, settings
from hypothesis import strategies as st

from domain_parkour.config import LocalOverrideSettings, Settings
from domain_parkour.enums import LogLevel
from domain_parkour.event_logger import EventLogger
from domain_parkour.handler import (
    CACHE_CONTROL,
    CONTENT_TYPE,
    create_kv_store,
    create_page_handler,
    extract_hostname,
    extract_preset_selector,
)
from domain_parkour.kv_client import StaticKVStore
from domain_parkour.server import create_app


NOW = datetime(2025, 6, 1, tzinfo=timezone.utc)

KV_VALUES = {
    "launch.example": {"mode": "coming-soon", "launchDate": "2030-01-01"},
    "hub.example": {"mode": "landing", "links": [{"title": "Docs", "url": "https://docs.example"}]},
    "odd.example": {"mode": "bogus"},
}


def make_handler(environment: Optional[dict] = None, settings_: Optional[Settings] = None, logger=None):
    return create_page_handler(
        settings_ or Settings(),
        environment or {},
        logger,
        kv_store=StaticKVStore(KV_VALUES),
    )


def handle(handler, url: str, cookies: Optional[dict] = None):
    return asyncio.run(handler.handle(url, cookies=cookies, now=NOW))


def write_presets(directory: str) -> Path:
    path = Path(directory) / "config.dev.local.json"
    path.write_text(json.dumps([
        {"name": "Sale", "mode": "parking", "title": "Buy me"},
        {"name": "Launch", "mode": "coming-soon", "title": "Soon"},
        {"name": "Hub", "mode": "landing", "title": "Links"},
    ]), encoding="utf-8")
    return path


class TestUrlParsingProperty:
    """The hostname comes from the URL authority, without port or case."""

    @given(
        host=st.sampled_from(["example.com", "Example.COM", "cdn-farm.io"]),
        port=st.one_of(st.none(), st.integers(min_value=1, max_value=65535)),
        path=st.sampled_from(["/", "/a/b", "/?x=1"]),
    )
    @settings(max_examples=50)
    def test_hostname_extraction(self, host: str, port: Optional[int], path: str) -> None:
        authority = f"{host}:{port}" if port else host
        assert extract_hostname(f"https://{authority}{path}") == host.lower()

    def test_preset_selector_query_beats_cookie(self) -> None:
        cookies = {"parkour_theme": "2"}
        assert extract_preset_selector("http://localhost/?theme=1", cookies) == "1"
        assert extract_preset_selector("http://localhost/", cookies) == "2"
        assert extract_preset_selector("http://localhost/") is None


class TestPageHandlerProperty:
    """Every request yields an HTML page with the serving headers."""

    @given(
        host=st.sampled_from(["unknown.example", "launch.example", "hub.example", "odd.example"]),
        path=st.sampled_from(["/", "/some/deep/path", "/index.html?q=1"]),
    )
    @settings(max_examples=50)
    def test_headers(self, host: str, path: str) -> None:
        response = handle(make_handler(), f"https://{host}{path}")
        assert response.status_code == 200
        assert response.headers["content-type"] == CONTENT_TYPE
        assert response.headers["cache-control"] == CACHE_CONTROL
        assert response.headers["x-served-domain"] == host
        assert response.body.startswith("<!DOCTYPE html>")

    def test_page_mode_header(self) -> None:
        handler = make_handler()
        assert handle(handler, "https://unknown.example/").headers["x-page-mode"] == "parking"
        assert handle(handler, "https://launch.example/").headers["x-page-mode"] == "coming-soon"
        assert handle(handler, "https://hub.example/").headers["x-page-mode"] == "landing"
        # Unknown modes are served, and reported, as parking pages.
        assert handle(handler, "https://odd.example/").headers["x-page-mode"] == "parking"

    def test_environment_overrides_apply(self) -> None:
        handler = make_handler({"HUB_EXAMPLE_TITLE": "Team Hub", "ACCENT_COLOR": "#ff0000"})
        response = handle(handler, "https://hub.example/")
        assert "Team Hub" in response.body
        assert "--accent-color-rgb: 255, 0, 0;" in response.body

    def test_page_served_is_logged(self) -> None:
        logger = EventLogger(output_stream=StringIO(), level=LogLevel.INFO, keep_entries=True)
        handle(make_handler(logger=logger), "https://hub.example/")
        served = [e for e in logger.entries if e.message == "Page served"]
        assert len(served) == 1
        assert served[0].data["mode"] == "landing"
        assert served[0].data["source"] == "kv_exact"

    def test_request_log_does_not_accumulate(self) -> None:
        logger = EventLogger(output_stream=StringIO())
        handler = make_handler(logger=logger)
        for _ in range(200):
            handle(handler, "https://example.com/")
        assert logger.entries == []

    def test_undecodable_override_file_still_renders(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.dev.local.json"
            path.write_bytes(b'[{"title": "\xff\xfe"}]')
            settings_ = Settings(local_overrides=LocalOverrideSettings(path=path))
            response = handle(make_handler(settings_=settings_), "http://localhost/")

        assert response.status_code == 200
        assert response.headers["x-page-mode"] == "parking"
        assert "Premium Domain For Sale" in response.body

    def test_dev_presets_switch_by_query_and_cookie(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            settings_ = Settings(local_overrides=LocalOverrideSettings(path=write_presets(tmp)))
            handler = make_handler(settings_=settings_)

            first = handle(handler, "http://localhost:8787/")
            by_query = handle(handler, "http://localhost:8787/?theme=1")
            by_cookie = handle(handler, "http://localhost:8787/", cookies={"parkour_theme": "2"})
            bad = handle(handler, "http://localhost:8787/?theme=99")

        assert first.headers["x-page-mode"] == "parking"
        assert 'id="preset-switcher"' in first.body
        assert by_query.headers["x-page-mode"] == "coming-soon"
        assert '<option value="1" selected>Launch</option>' in by_query.body
        assert by_cookie.headers["x-page-mode"] == "landing"
        assert bad.headers["x-page-mode"] == "parking"


class TestKVStoreWiringProperty:
    """Settings select the KV backend; a broken KV file is not fatal."""

    def test_no_store_configured(self) -> None:
        assert create_kv_store(Settings()) is None

    def test_kv_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "kv.json"
            path.write_text(json.dumps({"_default": {"title": "Fallback"}}), encoding="utf-8")
            store = create_kv_store(Settings(kv_file=path))
        assert isinstance(store, StaticKVStore)

    def test_broken_kv_file_is_logged(self) -> None:
        logger = EventLogger(output_stream=StringIO(), keep_entries=True)
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "kv.json"
            path.write_text("{oops", encoding="utf-8")
            assert create_kv_store(Settings(kv_file=path), logger) is None
        assert logger.entries[0].level is LogLevel.ERROR


class TestServerProperty:
    """The ASGI app serves the page for the Host header on every path."""

    def client(self, environment: Optional[dict] = None) -> TestClient:
        app = create_app(Settings(), environment or {}, kv_store=StaticKVStore(KV_VALUES))
        return TestClient(app)

    @given(path=st.sampled_from(["/", "/about", "/a/b/c"]))
    @settings(max_examples=10)
    def test_catch_all(self, path: str) -> None:
        response = self.client().get(path, headers={"host": "hub.example"})
        assert response.status_code == 200
        assert response.headers["content-type"] == CONTENT_TYPE
        assert response.headers["cache-control"] == CACHE_CONTROL
        assert response.headers["x-served-domain"] == "hub.example"
        assert response.headers["x-page-mode"] == "landing"
        assert "https://docs.example" in response.text

    def test_default_page_for_unknown_host(self) -> None:
        response = self.client().get("/", headers={"host": "nothing.example:8080"})
        assert response.headers["x-served-domain"] == "nothing.example"
        assert response.headers["x-page-mode"] == "parking"
        assert "nothing.example" in response.text

    def test_docs_are_disabled(self) -> None:
        response = self.client().get("/docs", headers={"host": "hub.example"})
        assert response.headers["x-page-mode"] == "landing"
