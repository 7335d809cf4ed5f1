"""
Cloud Run backends for the edge URL map: serverless NEG + backend service.
"""

from enum import Enum

from edge.context import Context
from edge.models import Environment
from edge.providers import InfraProvider, ResourceKind, ResourceRef

# Forwarded to Cloud Run so services see the client's country and origin.
CUSTOM_REQUEST_HEADERS: list[str] = [
    "X-Client-Geo-Country:{client_region}",
    "X-Client-Origin:{origin_request_header}",
]


class BackendType(str, Enum):
    HTTP = "http"
    WS = "ws"


def cloud_run_backend(
    service_name: str,
    ctx: Context,
    infra: InfraProvider,
    type: BackendType = BackendType.HTTP,
) -> ResourceRef:
    """
    Declare a serverless NEG for a Cloud Run service and a backend service on it.

    The WebSocket flavor targets the "<service>-ws" Cloud Run service. CDN and
    automatic compression are enabled everywhere except dev.

    Returns:
        Reference to the backend service, usable as ``Service.backend``.
    """
    cloud_run_service = (
        ctx.srn(service_name) if type == BackendType.HTTP else ctx.srn([service_name, type.value])
    )
    neg = infra.declare(
        ctx.rn(["service", service_name, "gcp", "neg", type.value]),
        ResourceKind.NETWORK_ENDPOINT_GROUP,
        {
            "name": ctx.srn([service_name, type.value]),
            "description": ctx.description,
            "region": ctx.region,
            "network_endpoint_type": "SERVERLESS",
            "cloud_run": {"service": cloud_run_service},
        },
    )

    cdn = ctx.environment != Environment.DEV.value
    spec = {
        "name": ctx.srn([service_name, type.value]),
        "description": ctx.description,
        "load_balancing_scheme": "EXTERNAL_MANAGED",
        "backends": [{"group": neg.attr("self_link")}],
        "custom_request_headers": list(CUSTOM_REQUEST_HEADERS),
        "enable_cdn": cdn,
    }
    if cdn:
        spec["compression_mode"] = "AUTOMATIC"

    return infra.declare(
        ctx.rn(["service", service_name, "gcp", "backend", type.value]),
        ResourceKind.BACKEND_SERVICE,
        spec,
        depends_on=[neg],
        ignore_changes=["used_by"],
    )
