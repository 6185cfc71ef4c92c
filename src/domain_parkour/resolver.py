"""
Configuration resolver.

Merges the base record chosen by the source chain with per-field
environment overrides and the derived presentation fields into one
immutable ConfigurationRecord per request.

Scalar precedence, highest first:

    <PREFIX>_<FIELD>  >  <FIELD>  >  base record  >  field default

Structured fields (features, links, socialLinks) come from the base
record only; they have no flat-string representation.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from .derived import derive_fields
from .enums import LogLevel, PageMode
from .event_logger import EventLogger
from .hostname import NormalizedHostname, normalize_hostname
from .models import (
    DEFAULT_ACCENT_COLOR,
    RECORD_FIELDS,
    ConfigurationRecord,
    Feature,
    Link,
    Preset,
    ResolvedConfig,
)
from .sources import ConfigSourceChain


# Record attribute -> environment variable suffix
ENV_OVERRIDE_FIELDS: dict[str, str] = {
    "domain": "DOMAIN",
    "domain_title": "DOMAIN_TITLE",
    "mode": "MODE",
    "title": "TITLE",
    "description": "DESCRIPTION",
    "sale_price": "SALE_PRICE",
    "contact_email": "CONTACT_EMAIL",
    "accent_color": "ACCENT_COLOR",
    "launch_date": "LAUNCH_DATE",
    "tagline": "TAGLINE",
    "subtitle": "SUBTITLE",
    "footer_text": "FOOTER_TEXT",
    "registration_date": "REGISTRATION_DATE",
}

FALSE_STRINGS = frozenset({"false", "0", "no", "off"})


@dataclass(frozen=True)
class EnvKeys:
    """Environment variable names consulted for one field."""

    per_domain: str
    global_key: str


def build_env_key_map(host: NormalizedHostname) -> dict[str, EnvKeys]:
    """Map every overridable field to its per-domain and global variable names."""
    return {
        attr: EnvKeys(per_domain=host.env_key(suffix), global_key=suffix)
        for attr, suffix in ENV_OVERRIDE_FIELDS.items()
    }


def select_preset(
    presets: tuple[Preset, ...], selector: Optional[Any]
) -> Optional[int]:
    """
    Index of the preset to use, or None without presets.

    Selectors that are not integers or are out of range select preset 0.
    """
    if not presets:
        return None
    try:
        index = int(selector)
    except (TypeError, ValueError):
        return 0
    if 0 <= index < len(presets):
        return index
    return 0


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return str(value)


def _as_flag(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip().lower() not in FALSE_STRINGS
    return bool(value)


def _features(value: Any) -> tuple[Feature, ...]:
    if not isinstance(value, list):
        return ()
    items = (Feature.from_value(item) for item in value)
    return tuple(item for item in items if item is not None)


def _links(value: Any) -> tuple[Link, ...]:
    if not isinstance(value, list):
        return ()
    items = (Link.from_value(item) for item in value)
    return tuple(item for item in items if item is not None)


def _social_links(value: Any) -> tuple[tuple[str, str], ...]:
    if not isinstance(value, dict):
        return ()
    return tuple((str(platform), str(url)) for platform, url in value.items() if url)


def merge_record(
    host: NormalizedHostname,
    base: Mapping[str, Any],
    environment: Mapping[str, str],
    now: Optional[datetime] = None,
) -> ConfigurationRecord:
    """
    Apply environment overrides and derived fields to a base record.

    Args:
        host: Normalized request hostname
        base: Raw camelCase record from the source chain
        environment: Flat environment table
        now: Evaluation instant for the domain age

    Returns:
        The final, immutable ConfigurationRecord
    """
    env_keys = build_env_key_map(host)

    def pick(attr: str) -> Optional[str]:
        keys = env_keys[attr]
        value = environment.get(keys.per_domain)
        if value is None:
            value = environment.get(keys.global_key)
        if value is None:
            value = base.get(RECORD_FIELDS[attr])
        return _as_text(value)

    scalars = {attr: pick(attr) for attr in ENV_OVERRIDE_FIELDS}

    domain = scalars.pop("domain") or host.canonical
    domain_title = scalars.pop("domain_title") or domain
    mode = scalars.pop("mode") or PageMode.PARKING.value
    accent_color = scalars.pop("accent_color") or DEFAULT_ACCENT_COLOR

    derived = derive_fields(domain_title, scalars["registration_date"], now=now)
    # Values stored in the base record win over recomputation.
    stored_age = _as_text(base.get("domainAgeYears"))
    stored_registration = _as_text(base.get("domainRegistration"))
    stored_extension = _as_text(base.get("domainExtension"))

    return ConfigurationRecord(
        domain=domain,
        domain_title=domain_title,
        mode=mode,
        accent_color=accent_color,
        domain_age_years=(
            stored_age if stored_age is not None else derived.domain_age_years
        ),
        domain_registration=(
            stored_registration
            if stored_registration is not None
            else derived.domain_registration
        ),
        domain_extension=(
            stored_extension if stored_extension is not None else derived.domain_extension
        ),
        features=_features(base.get("features")),
        links=_links(base.get("links")),
        social_links=_social_links(base.get("socialLinks")),
        show_credit=_as_flag(base.get("showCredit")),
        **scalars,
    )


class ConfigResolver:
    """
    Resolves the configuration record for a request.

    Never raises for configuration problems: every source fault is
    absorbed by the chain, which ends with the built-in default record.
    """

    COMPONENT = "resolver"

    def __init__(
        self,
        chain: ConfigSourceChain,
        logger: Optional[EventLogger] = None,
    ) -> None:
        self._chain = chain
        self._logger = logger

    async def resolve(
        self,
        hostname: str,
        environment: Mapping[str, str],
        preset_selector: Optional[Any] = None,
        now: Optional[datetime] = None,
    ) -> ResolvedConfig:
        """
        Resolve configuration for a hostname.

        Args:
            hostname: Hostname from the request URL
            environment: Flat environment table
            preset_selector: Requested preset index (query parameter or
                stored client preference), used only with local presets
            now: Evaluation instant for the domain age

        Returns:
            ResolvedConfig holding the record and the dev presets, if any
        """
        host = normalize_hostname(hostname)
        result = await self._chain.lookup(host, environment)

        base = result.data
        preset_index = select_preset(result.presets, preset_selector)
        if preset_index:
            base = {"domain": host.canonical, **result.presets[preset_index].data}
            if self._logger:
                self._logger.log(
                    LogLevel.DEBUG,
                    self.COMPONENT,
                    "Switched to local preset",
                    {"index": preset_index, "name": result.presets[preset_index].name},
                )

        record = merge_record(host, base, environment, now=now)
        return ResolvedConfig(
            record=record,
            source=result.source,
            presets=result.presets,
            preset_index=preset_index,
        )
