"""
Result values returned across the gateway and normalizer boundaries.

Neither boundary raises for expected failures; callers branch on the
`ok` flag (or isinstance) and read either the value or the error kind.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union


class GatewayErrorKind(str, Enum):
    network_exhausted = "network_exhausted"
    upstream_rejected = "upstream_rejected"
    malformed_payload = "malformed_payload"


class ValidationErrorKind(str, Enum):
    not_an_object = "not_an_object"
    missing_field = "missing_field"
    wrong_type = "wrong_type"
    insufficient_hints = "insufficient_hints"
    excess_hints = "excess_hints"


@dataclass(frozen=True)
class GatewayOk:
    """Parsed model payload. Not yet validated against the breakdown shape."""
    payload: dict[str, Any]
    attempts: int = 1
    ok: bool = field(default=True, init=False)


@dataclass(frozen=True)
class GatewayErr:
    kind: GatewayErrorKind
    detail: str = ""
    attempts: int = 1
    status_code: int | None = None
    ok: bool = field(default=False, init=False)


GatewayResult = Union[GatewayOk, GatewayErr]


@dataclass(frozen=True)
class NormalizeOk:
    steps: tuple  # tuple[Step, ...]
    ok: bool = field(default=True, init=False)


@dataclass(frozen=True)
class NormalizeErr:
    kind: ValidationErrorKind
    location: str = ""
    detail: str = ""
    ok: bool = field(default=False, init=False)


NormalizeResult = Union[NormalizeOk, NormalizeErr]
