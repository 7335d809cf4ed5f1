"""
Edge gateway - Pulumi entrypoint for the public HTTP(S) edge on GCP.

Wires the edge components using Pulumi config:

- **Zones**: extra records declared on each Cloudflare zone.
- **Public IP**: static global address with an A record in the technical
  zone; its alias is the CNAME target of every routed hostname.
- **Backends**: one serverless NEG + backend service per Cloud Run service
  referenced by the configured services.
- **EdgeEndpoint**: certificates, URL maps, proxies and forwarding rules for
  all services and redirects.

Stack exports: ip_alias, hostnames, url_map_id.
"""

import dataclasses

import pulumi

from config import StackConfig
from edge import (
    CloudflareDnsProvider,
    Context,
    EdgeEndpoint,
    EdgeEndpointArgs,
    PulumiGcpProvider,
    __version__,
    cloud_run_backend,
    provision_public_ip,
)


def main():
    """
    Build the public IP, backends and edge endpoint and export stack outputs.

    Reads config (zones, services, redirects, default domain), resolves each
    service's Cloud Run backend once, and declares the endpoint with the
    static IP alias as CNAME target for every hostname.
    """
    config = StackConfig.from_pulumi_config(
        pulumi.Config(), pulumi.get_stack(), pulumi.Config("gcp")
    )
    ctx = Context.create(
        environment=config.environment.value,
        project=config.gcp_project,
        region=config.gcp_region,
        project_name=config.project_name,
        version=__version__,
    )
    pulumi.log.info(f"Deploying edge {config.endpoint_id} to {ctx.project} ({ctx.environment})")

    infra = PulumiGcpProvider()
    dns = CloudflareDnsProvider(ctx.rn, resolve=infra.resolve)

    for zone in config.zones.values():
        for record in zone.records:
            dns.upsert_record(zone, record.name, record.type.value, record.value)

    public_ip = provision_public_ip(
        config.zones[config.technical_zone], ctx, infra, dns, id=config.endpoint_id
    )

    backends = {}
    for service in config.services:
        if service.backend not in backends:
            backends[service.backend] = cloud_run_backend(service.backend, ctx, infra)
    services = [
        dataclasses.replace(service, backend=backends[service.backend])
        for service in config.services
    ]

    endpoint = EdgeEndpoint(
        name=ctx.srn(["edge", config.endpoint_id]),
        args=EdgeEndpointArgs(
            services=services,
            redirects=config.redirects,
            default_domain=config.default_domain,
            ip_alias=public_ip.alias,
            ip=public_ip.ip,
            id=config.endpoint_id,
        ),
        ctx=ctx,
        infra=infra,
        dns=dns,
    )

    for output_name, value in [
        ("ip_alias", public_ip.alias),
        ("hostnames", endpoint.hostnames),
        ("url_map_id", endpoint.url_map_id),
    ]:
        pulumi.export(output_name, value)


if __name__ == "__main__":
    main()
