"""
Data models for the page generator.

This module defines the configuration record that drives rendering,
the intermediate results produced by configuration sources, and the
response handed back to the hosting layer.

Python attributes are snake_case; JSON records (KV values, environment
blobs, the local override file) use camelCase keys. RECORD_FIELDS maps
one onto the other.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Optional

from .enums import ConfigSource, PageMode


DEFAULT_ACCENT_COLOR = "#3b82f6"


@dataclass(frozen=True)
class Feature:
    """A single entry of the coming-soon feature grid."""

    title: str
    description: Optional[str] = None

    @classmethod
    def from_value(cls, value: Any) -> Optional["Feature"]:
        """Build a feature from a JSON item (object or bare title string)."""
        if isinstance(value, str):
            return cls(title=value)
        if isinstance(value, dict):
            title = value.get("title")
            if title is None:
                return None
            description = value.get("description")
            return cls(
                title=str(title),
                description=str(description) if description else None,
            )
        return None


@dataclass(frozen=True)
class Link:
    """A quick link on the landing page."""

    title: str
    url: str

    @classmethod
    def from_value(cls, value: Any) -> Optional["Link"]:
        """Build a link from a JSON object; items without a url are dropped."""
        if not isinstance(value, dict) or not value.get("url"):
            return None
        return cls(title=str(value.get("title") or value["url"]), url=str(value["url"]))


# Python attribute -> camelCase JSON key
RECORD_FIELDS: dict[str, str] = {
    "domain": "domain",
    "domain_title": "domainTitle",
    "mode": "mode",
    "title": "title",
    "description": "description",
    "tagline": "tagline",
    "subtitle": "subtitle",
    "registration_date": "registrationDate",
    "domain_age_years": "domainAgeYears",
    "domain_registration": "domainRegistration",
    "domain_extension": "domainExtension",
    "sale_price": "salePrice",
    "contact_email": "contactEmail",
    "launch_date": "launchDate",
    "features": "features",
    "links": "links",
    "social_links": "socialLinks",
    "accent_color": "accentColor",
    "footer_text": "footerText",
    "show_credit": "showCredit",
}

DERIVED_FIELDS = ("domain_age_years", "domain_registration", "domain_extension")


@dataclass(frozen=True)
class ConfigurationRecord:
    """
    Fully resolved configuration for one request.

    Built once by the resolver and never mutated afterwards. footer_text
    distinguishes None (use the mode's default footer) from "" (no footer).
    """

    domain: str
    domain_title: str
    mode: str = PageMode.PARKING.value
    title: Optional[str] = None
    description: Optional[str] = None
    tagline: Optional[str] = None
    subtitle: Optional[str] = None
    registration_date: Optional[str] = None
    domain_age_years: str = ""
    domain_registration: str = ""
    domain_extension: str = ""
    sale_price: Optional[str] = None
    contact_email: Optional[str] = None
    launch_date: Optional[str] = None
    features: tuple[Feature, ...] = ()
    links: tuple[Link, ...] = ()
    social_links: tuple[tuple[str, str], ...] = ()
    accent_color: str = DEFAULT_ACCENT_COLOR
    footer_text: Optional[str] = None
    show_credit: bool = True

    @property
    def page_mode(self) -> PageMode:
        """Template actually used for this record."""
        return PageMode.from_value(self.mode)

    def to_dict(self) -> dict:
        """Serialize with camelCase keys, as stored in KV or env blobs."""
        result: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == "features":
                value = [
                    {"title": item.title, "description": item.description}
                    if item.description
                    else {"title": item.title}
                    for item in value
                ]
            elif f.name == "links":
                value = [{"title": item.title, "url": item.url} for item in value]
            elif f.name == "social_links":
                value = dict(value)
            result[RECORD_FIELDS[f.name]] = value
        return result


@dataclass(frozen=True)
class DerivedFields:
    """Presentation fields computed from the domain title and registration date."""

    domain_age_years: str = ""
    domain_registration: str = ""
    domain_extension: str = ""


@dataclass(frozen=True)
class Preset:
    """A named configuration used by the development preset switcher."""

    name: str
    data: dict = field(default_factory=dict, compare=False)


@dataclass
class SourceResult:
    """Raw record produced by a configuration source."""

    source: ConfigSource
    data: dict
    presets: tuple[Preset, ...] = ()


@dataclass(frozen=True)
class ResolvedConfig:
    """Output of the resolver: the record plus dev-only switcher state."""

    record: ConfigurationRecord
    source: ConfigSource
    presets: tuple[Preset, ...] = ()
    preset_index: Optional[int] = None

    @property
    def is_dev(self) -> bool:
        return len(self.presets) > 1


@dataclass
class PageResponse:
    """Rendered page plus the headers the hosting layer should send."""

    body: str
    headers: dict[str, str]
    status_code: int = 200
