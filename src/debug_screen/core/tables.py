"""Contextual tables shown under the exception chain.

A table contributor is a callable ``(tables, request, error) -> None`` that
adds entries to the ordered ``tables`` mapping (title -> key/value mapping).
The debug screen runs contributors in order, so later ones can add tables
after the defaults.
"""

from __future__ import annotations

import os
import platform
import threading
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from debug_screen.interfaces.request import RequestContext
from debug_screen.utils.security import mask_env_value

MISSING = "-"

Tables = dict[str, Mapping[str, Any]]
TableContributor = Callable[[Tables, RequestContext, BaseException], None]


def to_ordered_mapping(items: Mapping[str, Any] | Iterable[tuple[str, Any]]) -> dict[str, Any]:
    """Copy key/value pairs into a dict, keeping the first value per key."""
    pairs = items.items() if isinstance(items, Mapping) else items
    result: dict[str, Any] = {}
    for key, value in pairs:
        result.setdefault(key, value)
    return result


def request_properties(request: RequestContext) -> dict[str, str]:
    """Basic request properties, with '-' for anything unavailable."""
    return {
        "URL": request.url or MISSING,
        "Scheme": request.scheme or MISSING,
        "Method": request.method or MISSING,
        "Protocol": request.protocol or MISSING,
        "Remote IP": request.remote_address or MISSING,
    }


def environment_info() -> dict[str, Any]:
    """Details about the process and thread handling the request."""
    current = threading.current_thread()
    return {
        "Thread ID": threading.get_ident(),
        "Thread Name": current.name,
        "Process ID": os.getpid(),
        "Python Version": platform.python_version(),
    }


def environment_variables(redact: bool = False) -> dict[str, str]:
    """Snapshot of the process environment, sorted by name."""
    return {
        key: mask_env_value(key, value) if redact else value
        for key, value in sorted(os.environ.items())
    }


def install_request_tables(tables: Tables, request: RequestContext, error: BaseException) -> None:
    """Add the request-derived tables."""
    tables["Request Headers"] = to_ordered_mapping(request.headers)
    tables["Request Properties"] = request_properties(request)
    tables["Route Parameters"] = to_ordered_mapping(request.route_params)
    tables["Query Parameters"] = to_ordered_mapping(request.query_params)
    tables["Session Attributes"] = to_ordered_mapping(request.session_attributes)
    tables["Request Attributes"] = to_ordered_mapping(request.attributes)
    tables["Cookies"] = to_ordered_mapping(request.cookies)


def install_environment_tables(
    tables: Tables,
    request: RequestContext,
    error: BaseException,
) -> None:
    """Add the process environment tables."""
    tables["Environment"] = environment_info()
    tables["Environment Variables"] = environment_variables()


def redacted_environment_tables(
    tables: Tables,
    request: RequestContext,
    error: BaseException,
) -> None:
    """Like install_environment_tables, masking sensitive variables."""
    tables["Environment"] = environment_info()
    tables["Environment Variables"] = environment_variables(redact=True)


DEFAULT_TABLE_CONTRIBUTORS: tuple[TableContributor, ...] = (
    install_request_tables,
    install_environment_tables,
)
