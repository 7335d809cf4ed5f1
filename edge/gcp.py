"""
Pulumi-backed infrastructure provider for GCP.

Turns declarations from the edge package into pulumi_gcp resources:

- the kind selects the resource class (Certificate Manager, Compute load
  balancing, global address, serverless NEG, backend service);
- ``RefAttr`` values in the declared arguments are resolved to outputs of resources
  declared earlier through the same provider;
- dependency edges become ``ResourceOptions.depends_on`` and ignore markers
  become ``ignore_changes``;
- ``delete_before_replace`` frees a unique name (e.g. a static address)
  before its replacement is created.

Pulumi performs the actual create/update/delete, with its own retries.
"""

from typing import Any, Mapping, Sequence

import pulumi
import pulumi_gcp as gcp

from edge.errors import ProviderError
from edge.providers import RefAttr, ResourceKind, ResourceRef

RESOURCE_CLASSES: dict[ResourceKind, type] = {
    ResourceKind.CERTIFICATE: gcp.certificatemanager.Certificate,
    ResourceKind.CERTIFICATE_MAP: gcp.certificatemanager.CertificateMap,
    ResourceKind.CERTIFICATE_MAP_ENTRY: gcp.certificatemanager.CertificateMapEntry,
    ResourceKind.URL_MAP: gcp.compute.URLMap,
    ResourceKind.TARGET_HTTPS_PROXY: gcp.compute.TargetHttpsProxy,
    ResourceKind.TARGET_HTTP_PROXY: gcp.compute.TargetHttpProxy,
    ResourceKind.GLOBAL_FORWARDING_RULE: gcp.compute.GlobalForwardingRule,
    ResourceKind.GLOBAL_ADDRESS: gcp.compute.GlobalAddress,
    ResourceKind.NETWORK_ENDPOINT_GROUP: gcp.compute.RegionNetworkEndpointGroup,
    ResourceKind.BACKEND_SERVICE: gcp.compute.BackendService,
}


class PulumiGcpProvider:
    """
    InfraProvider declaring pulumi_gcp resources.

    Every resource is created with ``parent`` (when given) so it is grouped
    under the owning component in the Pulumi UI and lifecycle.
    """

    def __init__(
        self,
        parent: pulumi.Resource | None = None,
        resource_classes: Mapping[ResourceKind, type] | None = None,
    ):
        self._parent = parent
        self._classes = dict(RESOURCE_CLASSES if resource_classes is None else resource_classes)
        self._resources: dict[str, Any] = {}

    def with_parent(self, parent: pulumi.Resource) -> "PulumiGcpProvider":
        """A provider parenting new resources to parent, sharing known references."""
        child = PulumiGcpProvider(parent, self._classes)
        child._resources = self._resources
        return child

    def resource(self, ref: ResourceRef) -> Any:
        """The Pulumi resource behind a reference returned by ``declare``."""
        try:
            return self._resources[ref.identity]
        except KeyError:
            raise ProviderError(f"unknown resource reference {ref.identity!r}") from None

    def resolve(self, value: Any) -> Any:
        """Replace every RefAttr inside value with the referenced output."""
        if isinstance(value, RefAttr):
            attribute = getattr(self.resource(value.ref), value.attribute)
            if value.template == "{}":
                return attribute
            return pulumi.Output.from_input(attribute).apply(value.template.format)
        if isinstance(value, dict):
            return {key: self.resolve(item) for key, item in value.items()}
        if isinstance(value, (list, tuple)):
            return [self.resolve(item) for item in value]
        return value

    def declare(
        self,
        identity: str,
        kind: ResourceKind,
        spec: dict[str, Any],
        depends_on: Sequence[ResourceRef] = (),
        ignore_changes: Sequence[str] = (),
        delete_before_replace: bool = False,
    ) -> ResourceRef:
        if identity in self._resources:
            raise ProviderError(f"resource {identity!r} declared twice")
        try:
            resource_class = self._classes[kind]
        except KeyError:
            raise ProviderError(f"no resource class registered for {kind.value!r}") from None

        opts = pulumi.ResourceOptions(
            parent=self._parent,
            depends_on=[self.resource(ref) for ref in depends_on],
            ignore_changes=list(ignore_changes) or None,
            delete_before_replace=delete_before_replace or None,
        )
        pulumi.log.debug(f"Declaring {kind.value} {identity}")
        try:
            resource = resource_class(identity, opts=opts, **self.resolve(spec))
        except TypeError as exc:
            raise ProviderError(f"invalid arguments for {kind.value} {identity!r}: {exc}") from exc

        self._resources[identity] = resource
        return ResourceRef(identity=identity, kind=kind)
