"""
Deterministic, environment-qualified identities for declared objects.

Two flavors are used side by side:

- **hierarchical** (``net/gcp/urlmap/primary:stage``): Pulumi resource names,
  i.e. the bookkeeping identity in the stack state.
- **flat** (``urlmap-primary-stage``): physical names sent to the cloud API,
  where ``/`` and ``:`` are not allowed.

Separators and the production marker are constructor arguments rather than
module constants, so two namers with different rules can coexist.
"""

from dataclasses import dataclass
from typing import Sequence

from edge._helpers import PRODUCTION
from edge.errors import ConfigurationError, Failure, Ok, Result

Segments = str | Sequence[str]


@dataclass(frozen=True)
class ResourceNamer:
    """
    Callable that turns name segments into an identity.

    Attributes:
        environment: Environment tag appended to every identity.
        production: Environment tag that gets no suffix.
        segment_separator: Joins the segments.
        environment_separator: Placed between the name and the environment.
        strict_segments: Reject segments containing the segment separator.
    """

    environment: str
    production: str = PRODUCTION
    segment_separator: str = "/"
    environment_separator: str = ":"
    strict_segments: bool = False

    @classmethod
    def hierarchical(cls, environment: str, production: str = PRODUCTION) -> "ResourceNamer":
        return cls(environment, production, "/", ":", strict_segments=True)

    @classmethod
    def flat(cls, environment: str, production: str = PRODUCTION) -> "ResourceNamer":
        return cls(environment, production, "-", "-")

    def try_name(self, segments: Segments) -> Result[str]:
        """
        Build the identity for segments, or a Failure describing why not.

        A bare string is treated as a single segment. Empty input and empty
        segments are rejected: a missing parent segment would silently merge
        two distinct identities. A strict namer also rejects segments holding
        its separator, which would fake an extra level of hierarchy.
        """
        parts = [segments] if isinstance(segments, str) else list(segments)
        if not parts:
            return Failure(ConfigurationError("identity requested without any name segment"))
        for index, part in enumerate(parts):
            if not part:
                return Failure(
                    ConfigurationError(f"empty name segment at position {index} in {parts!r}")
                )
            if self.strict_segments and self.segment_separator in part:
                return Failure(
                    ConfigurationError(
                        f"name segment {part!r} contains separator {self.segment_separator!r}"
                    )
                )

        name = self.segment_separator.join(parts)
        if self.environment != self.production:
            name = f"{name}{self.environment_separator}{self.environment}"
        return Ok(name)

    def __call__(self, segments: Segments) -> str:
        return self.try_name(segments).unwrap()
