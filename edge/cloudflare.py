"""
Cloudflare DNS provider: one pulumi_cloudflare.DnsRecord per (zone, type, name).

Record names are relative to the zone; "@" is the apex and is sent to
Cloudflare as the bare zone name. Values may be ``RefAttr`` (e.g. the
address of a static IP); they are resolved through the infrastructure
provider that declared the referenced object.
"""

from typing import Any, Callable

import pulumi
import pulumi_cloudflare as cloudflare

from edge._helpers import strip_trailing_dot
from edge.errors import ProviderError
from edge.models import Zone
from edge.naming import ResourceNamer

# TTL 1 lets Cloudflare pick ("automatic").
AUTO_TTL = 1


def record_fqdn(
    zone: Zone,
    name: str,
) -> str:
    return zone.name if name == "@" else f"{name}.{zone.name}"


class CloudflareDnsProvider:
    """
    DnsProvider declaring Cloudflare records through Pulumi.

    Upserting the same record twice with the same value is a no-op; a
    different value for an already declared record is rejected.
    """

    def __init__(
        self,
        rn: ResourceNamer,
        resolve: Callable[[Any], Any] = lambda value: value,
        parent: pulumi.Resource | None = None,
        provider: pulumi.ProviderResource | None = None,
        record_class: type = cloudflare.DnsRecord,
    ):
        self._rn = rn
        self._resolve = resolve
        self._parent = parent
        self._provider = provider
        self._record_class = record_class
        self._records: dict[str, tuple[Any, bool]] = {}

    def with_parent(self, parent: pulumi.Resource) -> "CloudflareDnsProvider":
        child = CloudflareDnsProvider(
            self._rn, self._resolve, parent, self._provider, self._record_class
        )
        child._records = self._records
        return child

    def upsert_record(
        self,
        zone: Zone,
        name: str,
        type: str,
        value: Any,
        proxied: bool = False,
    ) -> None:
        identity = self._rn(["zone", zone.name, "cf", type, "_root" if name == "@" else name])
        declared = self._records.get(identity)
        if declared is not None:
            if declared != (value, proxied):
                raise ProviderError(f"DNS record {identity!r} already declared with another value")
            return

        content = self._resolve(value)
        if isinstance(content, str):
            content = strip_trailing_dot(content)

        pulumi.log.debug(f"Declaring {type} record {record_fqdn(zone, name)}")
        self._record_class(
            identity,
            zone_id=zone.cloudflare.zone_id,
            name=record_fqdn(zone, name),
            type=type,
            content=content,
            ttl=AUTO_TTL,
            proxied=proxied,
            opts=pulumi.ResourceOptions(parent=self._parent, provider=self._provider),
        )
        self._records[identity] = (value, proxied)
