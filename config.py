"""
Stack configuration loaded from pulumi.Config().

Provides a typed, immutable view of stack settings. All settings are read from
Pulumi config (e.g. Pulumi.<stack>.yaml or pulumi config set). Used by
__main__.main() to build the context, the backends and the edge endpoint.

Structured keys (``zones``, ``services``, ``redirects``) are YAML lists::

    zones:
      - name: example.com
        cloudflare: {zone_id: "...", account_id: "..."}
        records: [{name: "@", type: TXT, value: "v=spf1 -all"}]
    services:
      - {subdomain: api, zone: example.com, backend: api}
    redirects:
      - {subdomain: www, zone: example.com, target: example.com}

Services and redirects name their zone; unknown zones raise
ReferentialIntegrityError, malformed entries ConfigurationError.
"""

from dataclasses import dataclass
from typing import Any, Callable

import pulumi

from edge.errors import ConfigurationError, ReferentialIntegrityError
from edge.models import CloudflareLink, DnsRecord, DnsRecordType, Environment, Redirect, Service, Zone


def _require_str(config: pulumi.Config, key: str) -> str:
    return config.require(key)


def _optional_str(default: str) -> Callable[[pulumi.Config, str], str]:
    def parse(config: pulumi.Config, key: str) -> str:
        return config.get(key) or default

    return parse


def _require_list(config: pulumi.Config, key: str) -> list[Any]:
    raw = config.require_object(key)
    if not isinstance(raw, list):
        raise ConfigurationError(f"config key {key!r} must be a list")
    return raw


def _optional_list(config: pulumi.Config, key: str) -> list[Any]:
    raw = config.get_object(key)
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ConfigurationError(f"config key {key!r} must be a list")
    return raw


# (key, parser); parser receives (config, key) and returns value.
_CONFIG_SPEC: list[tuple[str, Callable[[pulumi.Config, str], Any]]] = [
    ("project_name", _require_str),
    ("default_domain", _require_str),
    ("technical_zone", _require_str),
    ("gcp_region", _require_str),
    ("endpoint_id", _optional_str("primary")),
    ("zones", _require_list),
    ("services", _require_list),
    ("redirects", _optional_list),
]


def _field(entry: Any, name: str, where: str) -> Any:
    if not isinstance(entry, dict) or name not in entry:
        raise ConfigurationError(f"{where}: missing {name!r}")
    return entry[name]


def _record_type(value: Any) -> DnsRecordType:
    try:
        return DnsRecordType(value)
    except ValueError:
        raise ConfigurationError(f"unsupported DNS record type {value!r}") from None


def parse_zone(entry: Any) -> Zone:
    name = _field(entry, "name", "zone")
    link = _field(entry, "cloudflare", f"zone {name}")
    records = tuple(
        DnsRecord(
            name=_field(record, "name", f"zone {name} record"),
            type=_record_type(_field(record, "type", f"zone {name} record")),
            value=_field(record, "value", f"zone {name} record"),
        )
        for record in entry.get("records", [])
    )
    return Zone(
        name=name,
        cloudflare=CloudflareLink(
            zone_id=_field(link, "zone_id", f"zone {name} cloudflare"),
            account_id=_field(link, "account_id", f"zone {name} cloudflare"),
        ),
        records=records,
    )


def _lookup_zone(zones: dict[str, Zone], name: str, where: str) -> Zone:
    try:
        return zones[name]
    except KeyError:
        raise ReferentialIntegrityError(f"{where} references unknown zone {name!r}") from None


@dataclass(frozen=True)
class StackConfig:
    """
    Stack configuration from Pulumi config.

    Attributes:
        environment: Environment derived from the stack name.
        gcp_project: GCP project id (``gcp:project``).
        project_name: Project name used in resource descriptions (required).
        default_domain: Catch-all redirect target for unmatched hosts (required).
        technical_zone: Zone holding the static IP alias records (required).
        gcp_region: Region of the Cloud Run services (required).
        endpoint_id: Edge endpoint id (default "primary").
        zones: Zones by name (required).
        services: Services; ``backend`` is the Cloud Run service name (required).
        redirects: Redirects (optional).
    """

    environment: Environment
    gcp_project: str
    project_name: str
    default_domain: str
    technical_zone: str
    gcp_region: str
    endpoint_id: str
    zones: dict[str, Zone]
    services: tuple[Service, ...]
    redirects: tuple[Redirect, ...]

    @classmethod
    def from_pulumi_config(
        cls,
        config: pulumi.Config,
        stack: str,
        gcp_config: pulumi.Config,
    ) -> "StackConfig":
        """
        Build StackConfig from pulumi.Config(). Keys in _CONFIG_SPEC without
        a default are required.
        """
        raw = {key: parser(config, key) for key, parser in _CONFIG_SPEC}

        zones = {zone.name: zone for zone in map(parse_zone, raw["zones"])}
        technical_zone = raw["technical_zone"]
        _lookup_zone(zones, technical_zone, "technical_zone")

        services = tuple(
            Service(
                subdomain=_field(entry, "subdomain", "service"),
                zone=_lookup_zone(zones, _field(entry, "zone", "service"), "service"),
                backend=_field(entry, "backend", "service"),
            )
            for entry in raw["services"]
        )
        redirects = tuple(
            Redirect(
                subdomain=_field(entry, "subdomain", "redirect"),
                zone=_lookup_zone(zones, _field(entry, "zone", "redirect"), "redirect"),
                target=_field(entry, "target", "redirect"),
            )
            for entry in raw["redirects"]
        )

        try:
            environment = Environment.from_stack(stack)
        except ValueError:
            raise ConfigurationError(f"stack {stack!r} is not a known environment") from None

        return cls(
            environment=environment,
            gcp_project=gcp_config.require("project"),
            project_name=raw["project_name"],
            default_domain=raw["default_domain"],
            technical_zone=technical_zone,
            gcp_region=raw["gcp_region"],
            endpoint_id=raw["endpoint_id"],
            zones=zones,
            services=services,
            redirects=redirects,
        )
