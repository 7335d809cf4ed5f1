"""
Input data model: zones, services and redirects.

These are plain frozen dataclasses built by ``config.StackConfig`` (or by a
caller directly) and consumed by routing and endpoint assembly.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Environment(str, Enum):
    DEV = "dev"
    STAGE = "stage"
    PROD = "prod"

    @classmethod
    def from_stack(cls, stack: str) -> "Environment":
        """Map a Pulumi stack name to an environment; "master" is production."""
        if stack == "master":
            return cls.PROD
        return cls(stack)


class DnsRecordType(str, Enum):
    A = "A"
    CNAME = "CNAME"
    TXT = "TXT"


@dataclass(frozen=True)
class CloudflareLink:
    zone_id: str
    account_id: str


@dataclass(frozen=True)
class DnsRecord:
    name: str
    type: DnsRecordType
    value: str


@dataclass(frozen=True)
class Zone:
    """
    A DNS-managed domain hosted on Cloudflare.

    Attributes:
        name: Domain name (e.g. "example.com").
        cloudflare: Cloudflare zone/account linkage.
        records: Extra records declared with the zone.
    """

    name: str
    cloudflare: CloudflareLink
    records: tuple[DnsRecord, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Service:
    """A hostname routed to a compute backend. ``backend`` is any backend reference."""

    subdomain: str
    zone: Zone
    backend: Any


@dataclass(frozen=True)
class Redirect:
    """A hostname answered with a 303 redirect to ``target``."""

    subdomain: str
    zone: Zone
    target: str
