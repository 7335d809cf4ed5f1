"""
Public edge routing for GCP: certificates, DNS and the HTTPS load balancer.

Pure planning modules are testable without a Pulumi stack; the providers
and the component turn their declarations into Pulumi resources:

- **naming**: deterministic hierarchical (``a/b:env``) and flat (``a-b-env``)
  identities.
- **routing**: services and redirects into host rules and path matchers.
- **certificates**: managed certificate + certificate-map entry per hostname.
- **endpoint**: ordered assembly of an edge endpoint over the providers.
- **EdgeEndpoint**: ComponentResource wrapping the assembly; takes a
  ``PulumiGcpProvider`` (pulumi_gcp) and a ``CloudflareDnsProvider``
  (pulumi_cloudflare).
"""

from edge.backends import BackendType, cloud_run_backend
from edge.cloudflare import CloudflareDnsProvider
from edge.context import Context
from edge.endpoint import EdgeEndpointArgs, assemble_edge_endpoint
from edge.gcp import PulumiGcpProvider
from edge.load_balancer import EdgeEndpoint
from edge.public_ip import provision_public_ip

__version__ = "0.1.0"

__all__ = [
    "BackendType",
    "CloudflareDnsProvider",
    "Context",
    "EdgeEndpoint",
    "EdgeEndpointArgs",
    "PulumiGcpProvider",
    "assemble_edge_endpoint",
    "cloud_run_backend",
    "provision_public_ip",
]
