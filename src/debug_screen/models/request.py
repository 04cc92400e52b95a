"""Plain request snapshot handed to the debug screen."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class RequestSnapshot:
    """Read-only view of the request that failed.

    Host adapters copy what they need out of the framework request so the
    renderer never touches framework objects directly.
    """

    url: str | None = None
    scheme: str | None = None
    method: str | None = None
    protocol: str | None = None
    remote_address: str | None = None
    headers: Mapping[str, Any] = field(default_factory=dict)
    route_params: Mapping[str, Any] = field(default_factory=dict)
    query_params: Mapping[str, Any] = field(default_factory=dict)
    session_attributes: Mapping[str, Any] = field(default_factory=dict)
    attributes: Mapping[str, Any] = field(default_factory=dict)
    cookies: Mapping[str, Any] = field(default_factory=dict)
