"""
Certificate Manager: one managed certificate and one map entry per hostname.

Both objects are keyed by the dash-sanitized hostname, so re-declaring the
same hostname converges on the same pair. The certificate's ``managed``
block is ignored on reconciliation: the provider reports it back in a
different shape after issuance, which would otherwise show a diff (and a
replacement) on every run.
"""

from dataclasses import dataclass

from edge._helpers import sanitize_hostname
from edge.context import Context
from edge.providers import InfraProvider, ResourceKind, ResourceRef

DEFAULT_ENDPOINT_ID = "primary"


@dataclass(frozen=True)
class CertificateBinding:
    hostname: str
    certificate: ResourceRef
    entry: ResourceRef


def endpoint_scope(endpoint_id: str) -> list[str]:
    """Identity segments that keep a non-default endpoint's objects apart."""
    return [] if endpoint_id == DEFAULT_ENDPOINT_ID else [endpoint_id]


def certificate_id(
    hostname: str,
    endpoint_id: str = DEFAULT_ENDPOINT_ID,
) -> str:
    """Certificate Manager id: "api-example-com", or "edge2-api-example-com"."""
    return "-".join(endpoint_scope(endpoint_id) + [sanitize_hostname(hostname)])


def provision_certificate(
    hostname: str,
    certificate_map: ResourceRef,
    certificate_map_name: str,
    ctx: Context,
    infra: InfraProvider,
    endpoint_id: str = DEFAULT_ENDPOINT_ID,
) -> CertificateBinding:
    """
    Declare the managed certificate for hostname and bind it in the map.

    Args:
        hostname: Fully qualified hostname (dotted).
        certificate_map: Reference to the shared certificate map.
        certificate_map_name: Name of that map, used in entry identities.
        ctx: Stack context (namers, description).
        infra: Provider receiving the declarations.
        endpoint_id: Edge endpoint owning the certificate.

    Returns:
        References to the certificate and its map entry.
    """
    safe_name = sanitize_hostname(hostname)

    certificate = infra.declare(
        ctx.rn(["net", "gcp", "cert", *endpoint_scope(endpoint_id), hostname]),
        ResourceKind.CERTIFICATE,
        {
            "name": certificate_id(hostname, endpoint_id),
            "description": ctx.description,
            "managed": {"domains": [hostname]},
        },
        ignore_changes=["managed"],
    )

    entry = infra.declare(
        ctx.rn(["net", "gcp", "certmap", certificate_map_name, hostname]),
        ResourceKind.CERTIFICATE_MAP_ENTRY,
        {
            "name": safe_name,
            "description": ctx.description,
            "map": certificate_map.attr("name"),
            "certificates": [certificate.attr("id")],
            "hostname": hostname,
        },
        depends_on=[certificate, certificate_map],
    )

    return CertificateBinding(hostname=hostname, certificate=certificate, entry=entry)
