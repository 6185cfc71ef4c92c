"""
Hostname normalization.

Turns the hostname a request arrived under into the two keys used for
configuration lookup: the canonical dotted form (exact KV key) and the
environment-variable prefix (CDN_FARM_IO for cdn-farm.io).
"""

import re
from dataclasses import dataclass

import idna


IPV4_LITERAL_PATTERN = re.compile(r"^(\d{1,3}\.){3}\d{1,3}$")

# Characters replaced by "_" in the environment prefix
ENV_PREFIX_PATTERN = re.compile(r"[.\-]")


@dataclass(frozen=True)
class NormalizedHostname:
    """Lookup keys derived from a request hostname."""

    raw: str
    canonical: str
    env_prefix: str

    def env_key(self, suffix: str) -> str:
        """Per-domain environment variable name, e.g. CDN_FARM_IO_TITLE."""
        return f"{self.env_prefix}_{suffix}"


def is_ipv4_literal(value: str) -> bool:
    """Check whether a string is a dotted-quad IPv4 literal."""
    return bool(IPV4_LITERAL_PATTERN.match(value))


def to_canonical(hostname: str) -> str:
    """
    Convert a hostname to its canonical lookup form.

    Lowercases the name and IDNA-encodes international names. Names the
    IDNA codec rejects are kept lowercase as given; every input is valid.
    """
    lowered = hostname.strip().lower()
    if all(ord(c) < 128 for c in lowered):
        return lowered
    try:
        return idna.encode(lowered, uts46=True).decode("ascii")
    except (idna.IDNAError, UnicodeError):
        return lowered


def to_env_prefix(canonical: str) -> str:
    """Replace every '.' and '-' with '_' and uppercase the result."""
    return ENV_PREFIX_PATTERN.sub("_", canonical).upper()


def normalize_hostname(hostname: str) -> NormalizedHostname:
    """Derive both lookup keys for a request hostname."""
    canonical = to_canonical(hostname)
    return NormalizedHostname(
        raw=hostname,
        canonical=canonical,
        env_prefix=to_env_prefix(canonical),
    )
