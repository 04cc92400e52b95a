"""Abstract interfaces for the host framework's request and response."""

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class RequestContext(Protocol):
    """Read-only accessors for the request that raised.

    Scalar properties return None when the host cannot provide a value.
    """

    @property
    def url(self) -> str | None: ...

    @property
    def scheme(self) -> str | None: ...

    @property
    def method(self) -> str | None: ...

    @property
    def protocol(self) -> str | None: ...

    @property
    def remote_address(self) -> str | None: ...

    @property
    def headers(self) -> Mapping[str, Any]: ...

    @property
    def route_params(self) -> Mapping[str, Any]: ...

    @property
    def query_params(self) -> Mapping[str, Any]: ...

    @property
    def session_attributes(self) -> Mapping[str, Any]: ...

    @property
    def attributes(self) -> Mapping[str, Any]: ...

    @property
    def cookies(self) -> Mapping[str, Any]: ...


@runtime_checkable
class ResponseSink(Protocol):
    """Mutable response the debug screen writes its output into."""

    def status(self, code: int) -> None:
        """Set the HTTP status code."""
        ...

    def content_type(self, value: str) -> None:
        """Set the Content-Type header value."""
        ...

    def body(self, text: str) -> None:
        """Replace the response body."""
        ...
