"""Tests for route composition"""

import pytest

from edge import routing
from edge.errors import ConfigurationError, ReferentialIntegrityError
from edge.models import Redirect, Service
from edge.providers import RefAttr, ResourceKind, ResourceRef


class TestScopedSubdomain:
    def test_apex_in_production_is_empty(self):
        assert routing.scoped_subdomain("@", "prod") == ""

    def test_apex_outside_production_has_no_leading_dot(self):
        assert routing.scoped_subdomain("@", "stage") == "stage"

    def test_empty_subdomain_is_apex(self):
        assert routing.scoped_subdomain("", "dev") == "dev"

    def test_subdomain_outside_production(self):
        assert routing.scoped_subdomain("api", "stage") == "api.stage"

    def test_subdomain_in_production(self):
        assert routing.scoped_subdomain("api", "prod") == "api"


class TestHostname:
    def test_apex_is_zone_name(self):
        assert routing.hostname("", "example.com") == "example.com"

    def test_joins_labels(self):
        assert routing.hostname("api.stage", "example.com") == "api.stage.example.com"

    def test_dns_record_name_of_apex(self):
        assert routing.dns_record_name("") == "@"
        assert routing.dns_record_name("api.dev") == "api.dev"


class TestComposeServices:
    def test_apex_in_production(self, zone):
        table = routing.compose_routes(
            [Service("@", zone, "backend-root")], [], "example.com", "prod"
        )
        assert table.hostnames == ["example.com"]
        assert table.host_rules == (routing.HostRule(("example.com",), "root"),)
        assert table.path_matchers[0].name == "root"
        assert table.path_matchers[0].default_service == "backend-root"
        assert table.routes[0].dns_name == "@"

    def test_subdomain_in_stage(self, zone):
        table = routing.compose_routes([Service("api", zone, "be")], [], "example.com", "stage")
        assert table.hostnames == ["api.stage.example.com"]
        assert table.host_rules[0].path_matcher == "api"
        assert table.routes[0].dns_name == "api.stage"

    def test_apex_in_stage(self, zone):
        table = routing.compose_routes([Service("@", zone, "be")], [], "example.com", "stage")
        assert table.hostnames == ["stage.example.com"]
        assert table.path_matchers[0].name == "root"

    def test_backend_reference_becomes_id_attribute(self, zone):
        backend = ResourceRef("service/api/gcp/backend/http", ResourceKind.BACKEND_SERVICE)
        table = routing.compose_routes([Service("api", zone, backend)], [], "example.com", "prod")
        assert table.path_matchers[0].default_service == RefAttr(backend, "id")

    def test_missing_backend(self, zone):
        with pytest.raises(ReferentialIntegrityError):
            routing.compose_routes([Service("api", zone, None)], [], "example.com", "prod")

    def test_preserves_input_order(self, zone):
        services = [Service(name, zone, name) for name in ("b", "a", "c")]
        table = routing.compose_routes(services, [], "example.com", "prod")
        assert [m.name for m in table.path_matchers] == ["b", "a", "c"]


class TestComposeRedirects:
    def test_redirect_in_production(self, zone):
        table = routing.compose_routes(
            [], [Redirect("www", zone, "https://example.com")], "example.com", "prod"
        )
        assert table.host_rules == (routing.HostRule(("www.example.com",), "www"),)
        redirect = table.path_matchers[0].default_url_redirect
        assert redirect.host_redirect == "https://example.com"
        assert redirect.strip_query is False
        assert redirect.redirect_response_code == "SEE_OTHER"
        assert table.path_matchers[0].default_service is None

    def test_apex_redirect_uses_root_matcher(self, zone):
        table = routing.compose_routes([], [Redirect("@", zone, "www.example.com")], "x.com", "prod")
        assert table.hostnames == ["example.com"]
        assert table.path_matchers[0].name == "root"
        assert table.routes[0].dns_name == "@"

    def test_empty_subdomain_redirect_matches_service_convention(self, zone):
        service_table = routing.compose_routes([Service("", zone, "be")], [], "x.com", "dev")
        redirect_table = routing.compose_routes([], [Redirect("", zone, "t.com")], "x.com", "dev")
        assert service_table.hostnames == redirect_table.hostnames == ["dev.example.com"]

    def test_missing_target(self, zone):
        with pytest.raises(ConfigurationError):
            routing.compose_routes([], [Redirect("www", zone, "")], "example.com", "prod")

    def test_services_come_before_redirects(self, zone):
        table = routing.compose_routes(
            [Service("api", zone, "be")], [Redirect("www", zone, "example.com")], "example.com", "prod"
        )
        assert table.hostnames == ["api.example.com", "www.example.com"]


class TestDefaultAction:
    def test_catch_all_is_see_other_to_default_domain(self, zone):
        table = routing.compose_routes([Service("api", zone, "be")], [], "fallback.com", "prod")
        assert table.default_redirect == routing.UrlRedirect(
            host_redirect="fallback.com", strip_query=False, redirect_response_code="SEE_OTHER"
        )

    def test_default_domain_required(self, zone):
        with pytest.raises(ConfigurationError):
            routing.compose_routes([Service("api", zone, "be")], [], "", "prod")


class TestEmptyTable:
    def test_marked_unconfigured(self):
        table = routing.compose_routes([], [], "example.com", "prod")
        assert table.configured is False
        assert table.host_rules == ()
        assert table.path_matchers == ()

    def test_spec_omits_collections(self):
        table = routing.compose_routes([], [], "example.com", "prod")
        spec = routing.url_map_spec(table, "urlmap-primary", "desc")
        assert "host_rules" not in spec
        assert "path_matchers" not in spec
        assert routing.url_map_ignore_changes(table) == ["fingerprint", "host_rules", "path_matchers"]

    def test_redirect_only_table_is_configured(self, zone):
        table = routing.compose_routes([], [Redirect("www", zone, "example.com")], "x.com", "prod")
        assert table.configured is True
        assert routing.url_map_ignore_changes(table) == ["fingerprint"]


class TestCollisions:
    def test_same_subdomain_in_two_zones(self, zone, other_zone):
        table = routing.compose_routes(
            [Service("api", zone, "a"), Service("api", other_zone, "b")], [], "example.com", "prod"
        )
        assert table.hostnames == ["api.example.com", "api.example.org"]
        names = [m.name for m in table.path_matchers]
        assert names == ["api", "api-example-org"]
        assert [r.path_matcher for r in table.host_rules] == names

    def test_two_apexes_in_two_zones(self, zone, other_zone):
        table = routing.compose_routes(
            [Service("@", zone, "a"), Service("@", other_zone, "b")], [], "example.com", "prod"
        )
        assert [m.name for m in table.path_matchers] == ["root", "root-example-org"]

    def test_zone_suffixed_name_already_taken(self, zone, other_zone):
        table = routing.compose_routes(
            [
                Service("api-example-org", zone, "a"),
                Service("api", zone, "b"),
                Service("api", other_zone, "c"),
            ],
            [],
            "example.com",
            "prod",
        )
        assert table.hostnames == [
            "api-example-org.example.com",
            "api.example.com",
            "api.example.org",
        ]
        assert [m.name for m in table.path_matchers] == [
            "api-example-org",
            "api",
            "api-example-org-2",
        ]

    def test_duplicate_hostname(self, zone):
        with pytest.raises(ConfigurationError):
            routing.compose_routes(
                [Service("api", zone, "a")], [Redirect("api", zone, "x.com")], "example.com", "prod"
            )


class TestUrlMapSpec:
    def test_configured_table(self, zone):
        table = routing.compose_routes(
            [Service("api", zone, "be")], [Redirect("www", zone, "example.com")], "example.com", "prod"
        )
        spec = routing.url_map_spec(table, "urlmap-primary", "desc")
        assert spec["name"] == "urlmap-primary"
        assert spec["default_url_redirect"] == {
            "host_redirect": "example.com",
            "strip_query": False,
            "redirect_response_code": "SEE_OTHER",
        }
        assert spec["host_rules"] == [
            {"hosts": ["api.example.com"], "path_matcher": "api"},
            {"hosts": ["www.example.com"], "path_matcher": "www"},
        ]
        assert spec["path_matchers"] == [
            {"name": "api", "default_service": "be"},
            {
                "name": "www",
                "default_url_redirect": {
                    "host_redirect": "example.com",
                    "strip_query": False,
                    "redirect_response_code": "SEE_OTHER",
                },
            },
        ]
