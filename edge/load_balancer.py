"""
Global external HTTPS load balancer as a Pulumi ComponentResource.

Wraps ``assemble_edge_endpoint`` so a Pulumi program gets one component per
edge endpoint: every certificate, map entry, URL map, proxy, forwarding rule
and DNS record is parented to it. Several endpoints can coexist when each has
its own ``id`` (and its own static IP).
"""

import pulumi

from edge.cloudflare import CloudflareDnsProvider
from edge.context import Context
from edge.endpoint import EdgeEndpointArgs, assemble_edge_endpoint
from edge.gcp import PulumiGcpProvider

ID = "edge:gcp:EdgeEndpoint"


class EdgeEndpoint(pulumi.ComponentResource):
    """
    HTTPS (443) and HTTP-to-HTTPS (80) listeners on one static IP.

    Attributes:
        refs: References to every object declared by the assembly.

    Outputs:
        hostnames: Every hostname served, in routing order.
        url_map_id: Id of the HTTPS URL map.
        https_proxy_id: Id of the HTTPS target proxy.
    """

    def __init__(
        self,
        name: str,
        args: EdgeEndpointArgs,
        ctx: Context,
        infra: PulumiGcpProvider,
        dns: CloudflareDnsProvider,
        opts: pulumi.ResourceOptions | None = None,
    ):
        """
        Declare the endpoint.

        Args:
            name: Pulumi component name.
            args: Services, redirects, default domain, IP and endpoint id.
            ctx: Stack context.
            infra: Provider that declared ``args.ip`` and the service backends.
            dns: Cloudflare provider for the CNAME records.
            opts: Component options.
        """
        super().__init__(ID, name, None, opts)

        refs = assemble_edge_endpoint(args, ctx, infra.with_parent(self), dns.with_parent(self))

        self.refs = refs
        self.hostnames: list[str] = refs.route_table.hostnames
        self.url_map_id: pulumi.Output[str] = infra.resource(refs.url_map).id
        self.https_proxy_id: pulumi.Output[str] = infra.resource(refs.https_proxy).id
        self.register_outputs(
            {
                "hostnames": self.hostnames,
                "url_map_id": self.url_map_id,
                "https_proxy_id": self.https_proxy_id,
            }
        )
