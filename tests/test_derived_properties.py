"""
Property-based tests for derived presentation fields.

Uses Hypothesis for property-based testing of domain age, registration
sentence and extension computation.
"""

from datetime import date, datetime, timedelta, timezone

from hypothesis import given, settings
from hypothesis import strategies as st

from domain_parkour.derived import derive_fields, domain_extension, parse_iso_datetime


FIXED_NOW = datetime(2025, 6, 1, tzinfo=timezone.utc)


class TestDomainAgeProperty:
    """Age is whole years of 365.25 days, rendered as '<N>+'."""

    def test_known_registration_date(self) -> None:
        derived = derive_fields("example.com", "2010-01-15", now=FIXED_NOW)
        assert derived.domain_age_years == "15+"
        assert derived.domain_registration == "Registered in 2010"

    def test_full_timestamp_is_accepted(self) -> None:
        derived = derive_fields("example.com", "2010-01-15T08:30:00Z", now=FIXED_NOW)
        assert derived.domain_age_years == "15+"
        assert derived.domain_registration == "Registered in 2010"

    def test_naive_now_is_treated_as_utc(self) -> None:
        derived = derive_fields("example.com", "2010-01-15", now=datetime(2025, 6, 1))
        assert derived.domain_age_years == "15+"

    @given(registered=st.dates(min_value=date(1985, 1, 1), max_value=date(2025, 5, 31)))
    @settings(max_examples=100)
    def test_age_matches_formula(self, registered: date) -> None:
        derived = derive_fields("example.com", registered.isoformat(), now=FIXED_NOW)
        start = datetime(registered.year, registered.month, registered.day, tzinfo=timezone.utc)
        expected = int((FIXED_NOW - start) / timedelta(days=365.25))
        assert derived.domain_age_years == f"{expected}+"
        assert derived.domain_registration == f"Registered in {registered.year}"

    @given(value=st.sampled_from(["", "not-a-date", "2010-13-45", "15/01/2010", "yesterday"]))
    @settings(max_examples=20)
    def test_malformed_date_yields_empty_fields(self, value: str) -> None:
        derived = derive_fields("example.com", value, now=FIXED_NOW)
        assert derived.domain_age_years == ""
        assert derived.domain_registration == ""
        assert derived.domain_extension == ".com"

    def test_missing_date_yields_empty_fields(self) -> None:
        derived = derive_fields("example.com", None, now=FIXED_NOW)
        assert derived.domain_age_years == ""
        assert derived.domain_registration == ""

    def test_parse_returns_aware_datetime(self) -> None:
        parsed = parse_iso_datetime("2024-03-01T10:00:00")
        assert parsed is not None
        assert parsed.tzinfo is not None


class TestDomainExtensionProperty:
    """Extension is the last label of dotted, non-IPv4 names."""

    def test_ipv4_has_no_extension(self) -> None:
        assert derive_fields("127.0.0.1", None).domain_extension == ""

    def test_single_label_has_no_extension(self) -> None:
        assert domain_extension("localhost") == ""

    def test_missing_title_has_no_extension(self) -> None:
        assert domain_extension(None) == ""
        assert domain_extension("") == ""

    @given(
        labels=st.lists(
            st.text(alphabet="abcdefghijklmnopqrstuvwxyz", min_size=1, max_size=10),
            min_size=2,
            max_size=4,
        )
    )
    @settings(max_examples=100)
    def test_extension_is_last_label(self, labels: list[str]) -> None:
        assert domain_extension(".".join(labels)) == f".{labels[-1]}"
