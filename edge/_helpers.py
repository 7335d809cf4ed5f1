"""
Pure helpers for hostnames and naming. Testable without Pulumi runtime.

Used by routing (env_suffix, is_apex), certificates (sanitize_hostname), the
Cloudflare provider (strip_trailing_dot) and every component that stamps a
description on its resources (managed_by_description). No Pulumi types; all
functions accept and return plain Python types so they can be unit-tested
without a Pulumi stack.
"""

APEX_MARKERS: tuple[str, ...] = ("@", "")

PRODUCTION: str = "prod"
STAGE: str = "stage"


def env_suffix(
    env: str,
    separator: str = "-",
    skip_stage: bool = False,
    production: str = PRODUCTION,
) -> str:
    """
    Return the environment suffix for a name, or "" in production.

    Args:
        env: Environment tag (e.g. "dev", "stage", "prod").
        separator: Placed before the tag (e.g. "." for hostnames).
        skip_stage: Also return "" for the stage environment.
        production: Tag that never gets a suffix.

    Examples:
        env_suffix("prod") == ""
        env_suffix("stage") == "-stage"
        env_suffix("dev", ".") == ".dev"
    """
    if env == production:
        return ""
    if env == STAGE and skip_stage:
        return ""
    return f"{separator}{env}"


def is_apex(
    subdomain: str,
) -> bool:
    """True when subdomain denotes the zone apex ("@" or empty)."""
    return subdomain in APEX_MARKERS


def sanitize_hostname(
    hostname: str,
) -> str:
    """
    Replace dots with dashes so a hostname can be used as a resource id.

    Certificate Manager ids only allow lowercase letters, digits and dashes.
    """
    return hostname.replace(".", "-")


def strip_trailing_dot(
    domain: str,
) -> str:
    # Cloudflare rejects record content with a trailing dot.
    return domain[:-1] if domain.endswith(".") else domain


def managed_by_description(
    tool: str,
    project: str,
    version: str,
) -> str:
    """Description stamped on every declared resource."""
    return f"Managed by {tool} [{project}/{version}]"
