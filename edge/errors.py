"""
Error taxonomy and result types for edge provisioning.

Validation steps return ``Ok``/``Failure`` so callers can tell fatal from
recoverable conditions without catching exceptions; ``unwrap()`` turns a
failure back into its exception at the point where the caller has no
alternative.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


class EdgeError(Exception):
    """Base class for every error raised by the edge package."""


class ConfigurationError(EdgeError):
    """Caller supplied invalid or missing input. Never retried."""


class ProviderError(EdgeError):
    """The infrastructure or DNS provider rejected an operation."""


class ReferentialIntegrityError(EdgeError):
    """An input references a logical entity that cannot be resolved."""


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure:
    error: EdgeError
    recoverable: bool = False

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self):
        raise self.error


Result = Ok[T] | Failure
