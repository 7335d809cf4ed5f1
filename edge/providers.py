"""
Interfaces of the two external collaborators.

The edge package only decides what to declare, in which order and under
which identity. An ``InfraProvider`` turns a declaration into a cloud object
(``edge.gcp.PulumiGcpProvider`` does so with pulumi_gcp) and a ``DnsProvider``
upserts DNS records (``edge.cloudflare.CloudflareDnsProvider``). Tests use
recording fakes with the same shape.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, Sequence

from edge.models import Zone


class ResourceKind(str, Enum):
    CERTIFICATE = "certificate"
    CERTIFICATE_MAP = "certificate_map"
    CERTIFICATE_MAP_ENTRY = "certificate_map_entry"
    URL_MAP = "url_map"
    TARGET_HTTPS_PROXY = "target_https_proxy"
    TARGET_HTTP_PROXY = "target_http_proxy"
    GLOBAL_FORWARDING_RULE = "global_forwarding_rule"
    GLOBAL_ADDRESS = "global_address"
    NETWORK_ENDPOINT_GROUP = "network_endpoint_group"
    BACKEND_SERVICE = "backend_service"


@dataclass(frozen=True)
class ResourceRef:
    """Stable reference to a declared object: its identity and kind."""

    identity: str
    kind: ResourceKind

    def attr(self, attribute: str, template: str = "{}") -> "RefAttr":
        return RefAttr(self, attribute, template)


@dataclass(frozen=True)
class RefAttr:
    """
    An attribute of another declared object, used as a spec value.

    The provider resolves it once the referenced object exists; ``template``
    is formatted with the attribute value (e.g. to add a URL scheme).
    """

    ref: ResourceRef
    attribute: str
    template: str = "{}"


class InfraProvider(Protocol):
    def declare(
        self,
        identity: str,
        kind: ResourceKind,
        spec: dict[str, Any],
        depends_on: Sequence[ResourceRef] = (),
        ignore_changes: Sequence[str] = (),
        delete_before_replace: bool = False,
    ) -> ResourceRef:
        ...


class DnsProvider(Protocol):
    def upsert_record(
        self,
        zone: Zone,
        name: str,
        type: str,
        value: Any,
        proxied: bool = False,
    ) -> None:
        ...
