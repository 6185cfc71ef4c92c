"""
Property-based tests for the configuration resolver.

Checks scalar precedence (per-domain env > global env > base record >
default), the derived presentation fields, and dev preset selection.
"""

import asyncio
import json
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from hypothesis import given, settings
from hypothesis import strategies as st

from domain_parkour.config import LocalOverrideSettings
from domain_parkour.enums import ConfigSource, PageMode
from domain_parkour.hostname import normalize_hostname
from domain_parkour.kv_client import DEFAULT_KEY, StaticKVStore
from domain_parkour.models import Feature, Link, Preset
from domain_parkour.resolver import (
    ENV_OVERRIDE_FIELDS,
    ConfigResolver,
    build_env_key_map,
    merge_record,
    select_preset,
)
from domain_parkour.sources import ConfigSourceChain, KVSource, LocalOverrideSource


NOW = datetime(2025, 6, 1, tzinfo=timezone.utc)

# Printable values without surrogates; empty strings are valid overrides.
env_values = st.text(
    alphabet=st.characters(min_codepoint=32, max_codepoint=0x2FFF), max_size=20
)


def make_resolver(kv_values: Optional[dict] = None, local_path: Optional[Path] = None) -> ConfigResolver:
    local = LocalOverrideSource(LocalOverrideSettings(path=local_path)) if local_path else None
    chain = ConfigSourceChain(local_overrides=local, kv=KVSource(StaticKVStore(kv_values)))
    return ConfigResolver(chain)


def resolve(resolver: ConfigResolver, hostname: str, environment: Optional[dict] = None, **kwargs):
    return asyncio.run(resolver.resolve(hostname, environment or {}, now=NOW, **kwargs))


class TestDefaultResolutionProperty:
    """Without any configuration the result is a parking page for the hostname."""

    @given(hostname=st.sampled_from(["example.com", "cdn-farm.io", "a.b.c.example.net"]))
    @settings(max_examples=20)
    def test_unconfigured_hostname(self, hostname: str) -> None:
        resolved = resolve(make_resolver(), hostname)
        record = resolved.record

        assert resolved.source is ConfigSource.BUILTIN_DEFAULT
        assert record.domain == hostname
        assert record.domain_title == hostname
        assert record.page_mode is PageMode.PARKING
        assert record.accent_color == "#3b82f6"
        assert record.sale_price is None
        assert record.contact_email is None
        assert resolved.presets == ()
        assert resolved.preset_index is None
        assert not resolved.is_dev

    def test_uppercase_hostname_is_canonicalized(self) -> None:
        resolved = resolve(make_resolver({"example.com": {"title": "Exact"}}), "EXAMPLE.com")
        assert resolved.record.title == "Exact"
        assert resolved.record.domain == "example.com"

    def test_kv_default_key(self) -> None:
        resolver = make_resolver({DEFAULT_KEY: {"mode": "landing", "title": "Network"}})
        resolved = resolve(resolver, "any.example")
        assert resolved.source is ConfigSource.KV_DEFAULT
        assert resolved.record.page_mode is PageMode.LANDING
        assert resolved.record.domain == "any.example"


class TestOverridePrecedenceProperty:
    """Per-domain variables beat global variables, which beat the base record."""

    @given(
        attr=st.sampled_from(sorted(ENV_OVERRIDE_FIELDS)),
        per_domain=env_values,
        global_value=env_values,
    )
    @settings(max_examples=100)
    def test_per_domain_wins(self, attr: str, per_domain: str, global_value: str) -> None:
        host = normalize_hostname("cdn-farm.io")
        keys = build_env_key_map(host)[attr]
        environment = {keys.per_domain: per_domain, keys.global_key: global_value}

        record = merge_record(host, {}, environment, now=NOW)
        value = getattr(record, attr)

        if attr in ("domain", "domain_title", "mode", "accent_color") and per_domain == "":
            # Empty values of required fields fall back to their defaults.
            assert value != ""
        else:
            assert value == per_domain

    @given(global_value=env_values.filter(bool))
    @settings(max_examples=50)
    def test_global_beats_base(self, global_value: str) -> None:
        host = normalize_hostname("example.com")
        record = merge_record(host, {"title": "Stored"}, {"TITLE": global_value}, now=NOW)
        assert record.title == global_value

    def test_base_beats_default(self) -> None:
        host = normalize_hostname("example.com")
        record = merge_record(host, {"accentColor": "#ff0000", "mode": "coming-soon"}, {}, now=NOW)
        assert record.accent_color == "#ff0000"
        assert record.page_mode is PageMode.COMING_SOON

    def test_example_from_kv_and_env(self) -> None:
        resolver = make_resolver({"cdn-farm.io": {"title": "Base", "salePrice": "$500"}})
        environment = {"CDN_FARM_IO_TITLE": "Per Domain", "TITLE": "Global", "SALE_PRICE": "$900"}
        record = resolve(resolver, "cdn-farm.io", environment).record
        assert record.title == "Per Domain"
        assert record.sale_price == "$900"

    def test_other_domain_prefix_is_ignored(self) -> None:
        host = normalize_hostname("example.com")
        record = merge_record(host, {"title": "Stored"}, {"OTHER_COM_TITLE": "Nope"}, now=NOW)
        assert record.title == "Stored"

    def test_empty_footer_override_hides_footer(self) -> None:
        host = normalize_hostname("example.com")
        record = merge_record(host, {"footerText": "Stored"}, {"FOOTER_TEXT": ""}, now=NOW)
        assert record.footer_text == ""

    def test_structured_fields_come_from_base_only(self) -> None:
        host = normalize_hostname("example.com")
        base = {
            "features": ["Fast", {"title": "Secure", "description": "TLS"}, 42],
            "links": [{"title": "Docs", "url": "https://docs.example"}, {"title": "No url"}],
            "socialLinks": {"github": "https://github.com/example", "twitter": ""},
        }
        environment = {"FEATURES": "ignored", "EXAMPLE_COM_LINKS": "ignored"}
        record = merge_record(host, base, environment, now=NOW)

        assert record.features == (Feature("Fast"), Feature("Secure", "TLS"))
        assert record.links == (Link("Docs", "https://docs.example"),)
        assert record.social_links == (("github", "https://github.com/example"),)

    @given(value=st.sampled_from(["false", "False", "0", "no", "off", False]))
    @settings(max_examples=10)
    def test_credit_can_be_disabled(self, value) -> None:
        record = merge_record(normalize_hostname("example.com"), {"showCredit": value}, {}, now=NOW)
        assert record.show_credit is False

    def test_resolution_is_deterministic(self) -> None:
        resolver = make_resolver({"example.com": {"title": "Stored", "registrationDate": "2010-01-15"}})
        environment = {"DESCRIPTION": "Env"}
        first = resolve(resolver, "example.com", environment)
        second = resolve(resolver, "example.com", environment)
        assert first == second


class TestDerivedFieldsProperty:
    """Derived fields are computed from the merged domain title and registration date."""

    def test_derived_from_registration_override(self) -> None:
        host = normalize_hostname("example.com")
        record = merge_record(host, {}, {"REGISTRATION_DATE": "2010-01-15"}, now=NOW)
        assert record.domain_age_years == "15+"
        assert record.domain_registration == "Registered in 2010"
        assert record.domain_extension == ".com"

    def test_extension_follows_domain_title(self) -> None:
        host = normalize_hostname("example.com")
        record = merge_record(host, {"domainTitle": "brand.co.uk"}, {}, now=NOW)
        assert record.domain_extension == ".uk"

    def test_stored_derived_values_win(self) -> None:
        # Asymmetric with every other field: a stored domainAgeYears is kept
        # even though registrationDate would recompute a different value.
        host = normalize_hostname("example.com")
        base = {"registrationDate": "2010-01-15", "domainAgeYears": "20+"}
        record = merge_record(host, base, {}, now=NOW)
        assert record.domain_age_years == "20+"
        assert record.domain_registration == "Registered in 2010"

    def test_no_registration_date(self) -> None:
        record = merge_record(normalize_hostname("example.com"), {}, {}, now=NOW)
        assert record.domain_age_years == ""
        assert record.domain_registration == ""


class TestPresetSelectionProperty:
    """Invalid or out-of-range selectors choose the first preset."""

    presets = (Preset("A", {}), Preset("B", {}), Preset("C", {}))

    def test_no_presets(self) -> None:
        assert select_preset((), "1") is None

    @given(index=st.integers(min_value=0, max_value=2))
    @settings(max_examples=10)
    def test_valid_index(self, index: int) -> None:
        assert select_preset(self.presets, str(index)) == index

    @given(selector=st.one_of(
        st.none(),
        st.integers().filter(lambda i: i < 0 or i > 2),
        st.sampled_from(["", "abc", "1.5", "x1"]),
    ))
    @settings(max_examples=50)
    def test_invalid_selector(self, selector) -> None:
        assert select_preset(self.presets, selector) == 0

    def test_resolver_switches_preset(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "presets.json"
            path.write_text(json.dumps([
                {"name": "Sale", "mode": "parking", "title": "Buy me"},
                {"name": "Launch", "mode": "coming-soon", "title": "Soon"},
            ]), encoding="utf-8")
            resolver = make_resolver(local_path=path)

            first = resolve(resolver, "localhost")
            second = resolve(resolver, "localhost", preset_selector="1")
            public = resolve(resolver, "example.com", preset_selector="1")

        assert first.source is ConfigSource.LOCAL_OVERRIDE
        assert first.preset_index == 0
        assert first.record.title == "Buy me"
        assert first.is_dev

        assert second.preset_index == 1
        assert second.record.page_mode is PageMode.COMING_SOON
        assert second.record.title == "Soon"
        assert second.record.domain == "localhost"

        assert public.source is ConfigSource.BUILTIN_DEFAULT
        assert public.preset_index is None
