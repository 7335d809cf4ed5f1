"""
Edge endpoint assembly: certificates, URL maps, proxies and listeners.

Declares, in dependency order::

    certificate map
      -> per hostname: DNS CNAME, certificate, certificate-map entry
      -> URL map (route table, 303 catch-all)
      -> HTTPS target proxy (URL map + certificate map)
      -> HTTPS forwarding rule (static IP, :443)
      -> HTTP URL map (unconditional HTTPS redirect)
      -> HTTP target proxy
      -> HTTP forwarding rule (same IP, :80)

Hostnames are processed one at a time in input order. Any provider error
propagates and leaves the endpoint unconverged; every declaration is keyed
by a deterministic identity, so re-running is the recovery path.
"""

from dataclasses import dataclass, field
from typing import Any, Sequence

import pulumi

from edge.certificates import (
    DEFAULT_ENDPOINT_ID,
    CertificateBinding,
    endpoint_scope,
    provision_certificate,
)
from edge.context import Context
from edge.errors import ConfigurationError
from edge.models import DnsRecordType, Redirect, Service
from edge.providers import DnsProvider, InfraProvider, ResourceKind, ResourceRef
from edge.routing import RouteTable, compose_routes, url_map_ignore_changes, url_map_spec

HTTPS_PORT = "443"
HTTP_PORT = "80"
LOAD_BALANCING_SCHEME = "EXTERNAL_MANAGED"
CERTIFICATE_MANAGER_URI = "//certificatemanager.googleapis.com/{}"


@dataclass(frozen=True)
class EdgeEndpointArgs:
    """
    Attributes:
        services: Hostnames routed to backends.
        redirects: Hostnames answered with a 303 redirect.
        default_domain: Catch-all redirect target for unmatched hosts.
        ip_alias: Hostname every CNAME points to (the static IP's A record).
        ip: Reference to the static global address.
        id: Endpoint id; anything but "primary" is folded into identities.
    """

    services: Sequence[Service]
    default_domain: str
    ip_alias: Any
    ip: ResourceRef
    redirects: Sequence[Redirect] = field(default_factory=tuple)
    id: str = DEFAULT_ENDPOINT_ID


@dataclass(frozen=True)
class EdgeEndpointRefs:
    route_table: RouteTable
    certificate_map: ResourceRef
    certificates: tuple[CertificateBinding, ...]
    url_map: ResourceRef
    https_proxy: ResourceRef
    https_forwarding_rule: ResourceRef
    http_url_map: ResourceRef
    http_proxy: ResourceRef
    http_forwarding_rule: ResourceRef


def proxy_name(endpoint_id: str, protocol: str) -> str:
    """Proxy name: 'https' for the primary endpoint, '<id>-https' for any other."""
    return "-".join(endpoint_scope(endpoint_id) + [protocol])


def assemble_edge_endpoint(
    args: EdgeEndpointArgs,
    ctx: Context,
    infra: InfraProvider,
    dns: DnsProvider,
) -> EdgeEndpointRefs:
    """
    Declare every object of one public edge endpoint.

    Raises:
        ConfigurationError: Missing endpoint id or IP alias, or an invalid
            route table.
        ReferentialIntegrityError: A service without a backend.
        ProviderError: Propagated unchanged from either provider.
    """
    endpoint_id = args.id
    if not endpoint_id:
        raise ConfigurationError("edge endpoint id must not be empty")
    if not args.ip_alias:
        raise ConfigurationError(f"edge endpoint {endpoint_id!r} has no IP alias")

    table = compose_routes(args.services, args.redirects, args.default_domain, ctx.environment)
    pulumi.log.info(
        f"Edge endpoint {endpoint_id}: {len(table.routes)} hostname(s), "
        f"default redirect to {args.default_domain}"
    )

    certificate_map_name = endpoint_id
    certificate_map = infra.declare(
        ctx.rn(["net", "gcp", "certmap", certificate_map_name]),
        ResourceKind.CERTIFICATE_MAP,
        {"name": certificate_map_name, "description": ctx.description},
    )

    bindings: list[CertificateBinding] = []
    for route in table.routes:
        dns.upsert_record(route.zone, route.dns_name, DnsRecordType.CNAME.value, args.ip_alias)
        bindings.append(
            provision_certificate(
                route.hostname,
                certificate_map,
                certificate_map_name,
                ctx,
                infra,
                endpoint_id,
            )
        )

    url_map = infra.declare(
        ctx.rn(["net", "gcp", "urlmap", endpoint_id]),
        ResourceKind.URL_MAP,
        url_map_spec(table, ctx.srn(["urlmap", endpoint_id]), ctx.description),
        depends_on=[binding.entry for binding in bindings],
        ignore_changes=url_map_ignore_changes(table),
    )

    https_name = proxy_name(endpoint_id, "https")
    https_proxy = infra.declare(
        ctx.rn(["net", "gcp", "proxy", https_name]),
        ResourceKind.TARGET_HTTPS_PROXY,
        {
            "name": ctx.srn([https_name, "proxy"]),
            "description": ctx.description,
            "url_map": url_map.attr("id"),
            "certificate_map": certificate_map.attr("id", CERTIFICATE_MANAGER_URI),
        },
        depends_on=[url_map, certificate_map],
    )
    https_rule = infra.declare(
        ctx.rn(["net", "gcp", "fwd", https_name]),
        ResourceKind.GLOBAL_FORWARDING_RULE,
        {
            "name": ctx.srn([https_name, "fwd"]),
            "description": ctx.description,
            "load_balancing_scheme": LOAD_BALANCING_SCHEME,
            "target": https_proxy.attr("id"),
            "ip_address": args.ip.attr("self_link"),
            "port_range": HTTPS_PORT,
        },
        depends_on=[https_proxy, args.ip],
    )

    # Plain HTTP only ever answers with a redirect to HTTPS.
    http_name = proxy_name(endpoint_id, "http")
    http_url_map = infra.declare(
        ctx.rn(["net", "gcp", "urlmap", f"{endpoint_id}-http"]),
        ResourceKind.URL_MAP,
        {
            "name": ctx.srn(["urlmap", f"{endpoint_id}-http"]),
            "description": ctx.description,
            "default_url_redirect": {"https_redirect": True, "strip_query": False},
        },
        depends_on=[https_rule],
    )
    http_proxy = infra.declare(
        ctx.rn(["net", "gcp", "proxy", http_name]),
        ResourceKind.TARGET_HTTP_PROXY,
        {
            "name": ctx.srn([http_name, "proxy"]),
            "description": ctx.description,
            "url_map": http_url_map.attr("id"),
        },
        depends_on=[http_url_map],
    )
    http_rule = infra.declare(
        ctx.rn(["net", "gcp", "fwd", http_name]),
        ResourceKind.GLOBAL_FORWARDING_RULE,
        {
            "name": ctx.srn([http_name, "fwd"]),
            "description": ctx.description,
            "load_balancing_scheme": LOAD_BALANCING_SCHEME,
            "target": http_proxy.attr("id"),
            "ip_address": args.ip.attr("self_link"),
            "port_range": HTTP_PORT,
        },
        depends_on=[http_proxy, args.ip],
    )

    return EdgeEndpointRefs(
        route_table=table,
        certificate_map=certificate_map,
        certificates=tuple(bindings),
        url_map=url_map,
        https_proxy=https_proxy,
        https_forwarding_rule=https_rule,
        http_url_map=http_url_map,
        http_proxy=http_proxy,
        http_forwarding_rule=http_rule,
    )
