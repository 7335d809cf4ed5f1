"""Shared fixtures: recording fake providers, Pulumi mocks and sample zones."""

from dataclasses import dataclass, field
from typing import Any, Callable

import pulumi
import pytest

from edge.context import Context
from edge.errors import ProviderError
from edge.models import CloudflareLink, Zone
from edge.providers import ResourceKind, ResourceRef


class EdgeMocks(pulumi.runtime.Mocks):
    """Resources get id "<name>_id" and echo their inputs as state."""

    def new_resource(self, args: pulumi.runtime.MockResourceArgs):
        return [f"{args.name}_id", args.inputs]

    def call(self, args: pulumi.runtime.MockCallArgs):
        return {}


class Group(pulumi.ComponentResource):
    def __init__(self, name: str):
        super().__init__("test:index:Group", name)


@dataclass
class Declaration:
    identity: str
    kind: ResourceKind
    spec: dict[str, Any]
    depends_on: list[ResourceRef]
    ignore_changes: list[str]
    delete_before_replace: bool = False


@dataclass
class FakeInfraProvider:
    fail_on: Callable[[str, ResourceKind, dict[str, Any]], bool] | None = None
    declarations: list[Declaration] = field(default_factory=list)

    def declare(
        self, identity, kind, spec, depends_on=(), ignore_changes=(), delete_before_replace=False
    ):
        if self.fail_on is not None and self.fail_on(identity, kind, spec):
            raise ProviderError(f"rejected {identity}")
        self.declarations.append(
            Declaration(
                identity,
                kind,
                spec,
                list(depends_on),
                list(ignore_changes),
                delete_before_replace,
            )
        )
        return ResourceRef(identity=identity, kind=kind)

    def of_kind(self, kind: ResourceKind) -> list[Declaration]:
        return [d for d in self.declarations if d.kind == kind]

    def get(self, identity: str) -> Declaration:
        return next(d for d in self.declarations if d.identity == identity)

    @property
    def identities(self) -> list[str]:
        return [d.identity for d in self.declarations]


@dataclass
class FakeDnsProvider:
    fail_on_name: str | None = None
    records: list[tuple[str, str, str, Any, bool]] = field(default_factory=list)

    def upsert_record(self, zone, name, type, value, proxied=False):
        if name == self.fail_on_name:
            raise ProviderError(f"rejected record {name}")
        self.records.append((zone.name, name, type, value, proxied))


def make_zone(name: str) -> Zone:
    return Zone(name=name, cloudflare=CloudflareLink(zone_id=f"zid-{name}", account_id="acc"))


def make_context(environment: str) -> Context:
    return Context.create(
        environment=environment,
        project="my-project",
        region="europe-west1",
        project_name="edge-gateway",
        version="0.1.0",
    )


@pytest.fixture
def zone() -> Zone:
    return make_zone("example.com")


@pytest.fixture
def other_zone() -> Zone:
    return make_zone("example.org")


@pytest.fixture
def stage_ctx() -> Context:
    return make_context("stage")


@pytest.fixture
def prod_ctx() -> Context:
    return make_context("prod")


@pytest.fixture
def infra() -> FakeInfraProvider:
    return FakeInfraProvider()


@pytest.fixture
def dns() -> FakeDnsProvider:
    return FakeDnsProvider()
