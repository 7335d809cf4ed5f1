"""
Route composition: services and redirects into a host-routing table.

Each service or redirect yields one hostname, one host rule and one path
matcher. Hostnames are environment-scoped (``api.stage.example.com``) while
path-matcher names keep the raw subdomain (``api``), so matcher identity is
stable across environments. Unmatched hosts fall through to a 303 redirect
to the default domain.

Pure module: no Pulumi types, no side effects.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable

from edge._helpers import env_suffix, is_apex, sanitize_hostname
from edge.errors import ConfigurationError, ReferentialIntegrityError
from edge.models import Redirect, Service, Zone
from edge.providers import ResourceRef

ROOT_PATH_MATCHER = "root"
SEE_OTHER = "SEE_OTHER"


@dataclass(frozen=True)
class UrlRedirect:
    host_redirect: str
    strip_query: bool = False
    redirect_response_code: str = SEE_OTHER

    def as_spec(self) -> dict[str, Any]:
        return {
            "host_redirect": self.host_redirect,
            "strip_query": self.strip_query,
            "redirect_response_code": self.redirect_response_code,
        }


@dataclass(frozen=True)
class HostRule:
    hosts: tuple[str, ...]
    path_matcher: str

    def as_spec(self) -> dict[str, Any]:
        return {"hosts": list(self.hosts), "path_matcher": self.path_matcher}


@dataclass(frozen=True)
class PathMatcher:
    """Exactly one of ``default_service`` and ``default_url_redirect`` is set."""

    name: str
    default_service: Any = None
    default_url_redirect: UrlRedirect | None = None

    def as_spec(self) -> dict[str, Any]:
        spec: dict[str, Any] = {"name": self.name}
        if self.default_url_redirect is not None:
            spec["default_url_redirect"] = self.default_url_redirect.as_spec()
        else:
            spec["default_service"] = self.default_service
        return spec


@dataclass(frozen=True)
class Route:
    """
    A resolved hostname together with what the DNS provider needs.

    Attributes:
        hostname: Fully qualified hostname (e.g. "api.stage.example.com").
        zone: Zone the hostname lives in.
        dns_name: Record name relative to the zone ("@" for the apex).
        path_matcher: Name of the matcher serving this hostname.
    """

    hostname: str
    zone: Zone
    dns_name: str
    path_matcher: str


@dataclass(frozen=True)
class RouteTable:
    """
    Host rules and path matchers plus the catch-all redirect.

    ``configured`` is False when no service or redirect was given: the host
    rules and path matchers are then "not configured" rather than
    "configured empty", and must not be declared on the URL map.
    """

    default_redirect: UrlRedirect
    host_rules: tuple[HostRule, ...] = ()
    path_matchers: tuple[PathMatcher, ...] = ()
    routes: tuple[Route, ...] = ()
    configured: bool = field(default=False)

    @property
    def hostnames(self) -> list[str]:
        return [route.hostname for route in self.routes]


def scoped_subdomain(
    subdomain: str,
    env: str,
) -> str:
    """
    Environment-scoped subdomain label(s).

    The apex collapses to the bare environment tag (or "" in production);
    any other subdomain gets a dot-prefixed tag: "api" -> "api.stage".
    """
    if is_apex(subdomain):
        return env_suffix(env, "")
    return f"{subdomain}{env_suffix(env, '.')}"


def hostname(
    scoped: str,
    zone_name: str,
) -> str:
    """Join a scoped subdomain with its zone; an empty label is the apex."""
    return f"{scoped}.{zone_name}" if scoped else zone_name


def dns_record_name(
    scoped: str,
) -> str:
    return scoped if scoped else "@"


def path_matcher_name(
    subdomain: str,
) -> str:
    return ROOT_PATH_MATCHER if is_apex(subdomain) else subdomain


def _backend_value(backend: Any) -> Any:
    if isinstance(backend, ResourceRef):
        return backend.attr("id")
    return backend


class _TableBuilder:
    def __init__(self, environment: str):
        self.environment = environment
        self.host_rules: list[HostRule] = []
        self.path_matchers: list[PathMatcher] = []
        self.routes: list[Route] = []
        self._hostnames: set[str] = set()
        self._matcher_names: set[str] = set()

    def _unique_matcher_name(self, subdomain: str, zone: Zone) -> str:
        name = path_matcher_name(subdomain)
        if name not in self._matcher_names:
            return name
        # Same subdomain in another zone: hostnames differ, matcher names must too.
        base = f"{name}-{sanitize_hostname(zone.name)}"
        candidate, counter = base, 2
        while candidate in self._matcher_names:
            candidate = f"{base}-{counter}"
            counter += 1
        return candidate

    def add(self, subdomain: str, zone: Zone, **action: Any) -> None:
        scoped = scoped_subdomain(subdomain, self.environment)
        fqdn = hostname(scoped, zone.name)
        if fqdn in self._hostnames:
            raise ConfigurationError(f"hostname {fqdn!r} is routed more than once")

        matcher = self._unique_matcher_name(subdomain, zone)
        self._hostnames.add(fqdn)
        self._matcher_names.add(matcher)

        self.host_rules.append(HostRule(hosts=(fqdn,), path_matcher=matcher))
        self.path_matchers.append(PathMatcher(name=matcher, **action))
        self.routes.append(
            Route(hostname=fqdn, zone=zone, dns_name=dns_record_name(scoped), path_matcher=matcher)
        )


def compose_routes(
    services: Iterable[Service],
    redirects: Iterable[Redirect],
    default_domain: str,
    environment: str,
) -> RouteTable:
    """
    Build the routing table for an edge endpoint.

    Args:
        services: Hostnames routed to a backend, in declaration order.
        redirects: Hostnames answered with a 303 to their target.
        default_domain: Redirect target for hosts matching no rule.
        environment: Environment tag used to scope hostnames.

    Raises:
        ConfigurationError: Empty default domain, or two entries resolving
            to the same hostname.
        ReferentialIntegrityError: A service without a backend.
    """
    if not default_domain:
        raise ConfigurationError("default domain is required")

    builder = _TableBuilder(environment)
    for service in services:
        if service.backend is None:
            raise ReferentialIntegrityError(
                f"service {service.subdomain!r} in zone {service.zone.name!r} has no backend"
            )
        builder.add(service.subdomain, service.zone, default_service=_backend_value(service.backend))

    for redirect in redirects:
        if not redirect.target:
            raise ConfigurationError(
                f"redirect {redirect.subdomain!r} in zone {redirect.zone.name!r} has no target"
            )
        builder.add(
            redirect.subdomain,
            redirect.zone,
            default_url_redirect=UrlRedirect(host_redirect=redirect.target),
        )

    return RouteTable(
        default_redirect=UrlRedirect(host_redirect=default_domain),
        host_rules=tuple(builder.host_rules),
        path_matchers=tuple(builder.path_matchers),
        routes=tuple(builder.routes),
        configured=bool(builder.routes),
    )


def url_map_spec(
    table: RouteTable,
    name: str,
    description: str,
) -> dict[str, Any]:
    """URL map arguments for a route table; unconfigured collections are omitted."""
    spec: dict[str, Any] = {
        "name": name,
        "description": description,
        "default_url_redirect": table.default_redirect.as_spec(),
    }
    if table.configured:
        spec["host_rules"] = [rule.as_spec() for rule in table.host_rules]
        spec["path_matchers"] = [matcher.as_spec() for matcher in table.path_matchers]
    return spec


def url_map_ignore_changes(
    table: RouteTable,
) -> list[str]:
    ignores = ["fingerprint"]
    if not table.configured:
        ignores.extend(["host_rules", "path_matchers"])
    return ignores
