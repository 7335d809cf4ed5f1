"""
Per-stack context shared by every component: environment, GCP project,
the two resource namers and the managed-by description.
"""

from dataclasses import dataclass

from edge._helpers import managed_by_description
from edge.naming import ResourceNamer

TOOL_NAME = "edge-gateway"


@dataclass(frozen=True)
class Context:
    """
    Attributes:
        environment: Environment tag (e.g. "stage").
        project: GCP project id.
        region: GCP region for regional resources (serverless NEGs).
        rn: Hierarchical namer for Pulumi resource names.
        srn: Flat namer for physical cloud names.
        description: Stamped on every declared resource.
    """

    environment: str
    project: str
    region: str
    rn: ResourceNamer
    srn: ResourceNamer
    description: str

    @classmethod
    def create(
        cls,
        environment: str,
        project: str,
        region: str,
        project_name: str,
        version: str,
    ) -> "Context":
        return cls(
            environment=environment,
            project=project,
            region=region,
            rn=ResourceNamer.hierarchical(environment),
            srn=ResourceNamer.flat(environment),
            description=managed_by_description(TOOL_NAME, project_name, version),
        )
