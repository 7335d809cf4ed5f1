"""
Static global IP for an edge endpoint, published under a DNS alias.

Every routed hostname is a CNAME to the alias
(``primary.<project>.gcloud.<technical zone>``) rather than an A record to
the address, so the IP can be replaced by touching one record.
"""

from dataclasses import dataclass

from edge.certificates import DEFAULT_ENDPOINT_ID
from edge.context import Context
from edge.models import DnsRecordType, Zone
from edge.providers import DnsProvider, InfraProvider, ResourceKind, ResourceRef


@dataclass(frozen=True)
class PublicIp:
    ip: ResourceRef
    alias: str


def provision_public_ip(
    technical_zone: Zone,
    ctx: Context,
    infra: InfraProvider,
    dns: DnsProvider,
    id: str = DEFAULT_ENDPOINT_ID,
) -> PublicIp:
    """
    Declare the global address and its A record in the technical zone.

    Returns:
        The address reference and the fully qualified alias to use as the
        CNAME value of every routed hostname.
    """
    ip = infra.declare(
        ctx.rn(["net", "gcp", "ip", id]),
        ResourceKind.GLOBAL_ADDRESS,
        {"name": ctx.srn(["ip", id]), "description": ctx.description},
        ignore_changes=["address", "label_fingerprint"],
        delete_before_replace=True,
    )

    alias = f"{id}.{ctx.project}.gcloud"
    dns.upsert_record(technical_zone, alias, DnsRecordType.A.value, ip.attr("address"))

    return PublicIp(ip=ip, alias=f"{alias}.{technical_zone.name}")
