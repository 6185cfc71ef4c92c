"""
Derived presentation fields.

Computes the domain age badge, the registration sentence and the
extension shown on the parking page from raw configuration inputs.
"""

from datetime import date, datetime, timezone
from typing import Optional

from .hostname import is_ipv4_literal
from .models import DerivedFields


SECONDS_PER_YEAR = 365.25 * 24 * 60 * 60


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO date or datetime string as a UTC-aware datetime.

    Returns None for missing or unparsable values. Date-only strings are
    taken as midnight UTC.
    """
    if not value or not isinstance(value, str):
        return None

    text = value.strip()
    try:
        if len(text) == 10:
            parsed_date = date.fromisoformat(text)
            return datetime(
                parsed_date.year, parsed_date.month, parsed_date.day, tzinfo=timezone.utc
            )
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def domain_extension(domain_title: Optional[str]) -> str:
    """Return '.<last label>' for dotted names, '' for IPv4 literals and single labels."""
    if not domain_title or is_ipv4_literal(domain_title):
        return ""
    labels = domain_title.split(".")
    if len(labels) > 1:
        return f".{labels[-1]}"
    return ""


def derive_fields(
    domain_title: Optional[str],
    registration_date: Optional[str],
    now: Optional[datetime] = None,
) -> DerivedFields:
    """
    Compute age, registration sentence and extension.

    Args:
        domain_title: Display name of the domain
        registration_date: ISO date string, may be None or malformed
        now: Evaluation instant (defaults to the current UTC time)

    Returns:
        DerivedFields; age and registration are empty when the date is
        missing or unparsable
    """
    extension = domain_extension(domain_title)

    registered = parse_iso_datetime(registration_date)
    if registered is None:
        return DerivedFields(domain_extension=extension)

    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    age_years = int((now - registered).total_seconds() // SECONDS_PER_YEAR)
    return DerivedFields(
        domain_age_years=f"{age_years}+",
        domain_registration=f"Registered in {registered.year}",
        domain_extension=extension,
    )
