"""Shared test fixtures for the debug screen."""

from pathlib import Path

import pytest

from debug_screen.models.request import RequestSnapshot

SAMPLE_MODULE = """\
# Sample module
import json


def parse_input(value):
    \"\"\"Parse user input.\"\"\"

    return int(value)
"""


class RecordingResponse:
    """ResponseSink that records every call."""

    def __init__(self) -> None:
        self.status_code: int | None = None
        self.media_type: str | None = None
        self.content: str | None = None
        self.calls: list[str] = []

    def status(self, code: int) -> None:
        self.calls.append("status")
        self.status_code = code

    def content_type(self, value: str) -> None:
        self.calls.append("content_type")
        self.media_type = value

    def body(self, text: str) -> None:
        self.calls.append("body")
        self.content = text


def raised(error: BaseException) -> BaseException:
    """Raise and catch an exception so it carries a traceback."""
    try:
        raise error
    except BaseException as e:
        return e


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep DEBUG_SCREEN_* variables from the outer environment out of tests."""
    for name in (
        "DEBUG_SCREEN_DEV",
        "DEBUG_SCREEN_TEMPLATE_DIR",
        "DEBUG_SCREEN_SOURCE_ROOTS",
        "DEBUG_SCREEN_CONTEXT_LINES",
        "DEBUG_SCREEN_REDACT_ENVIRONMENT",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def source_root(tmp_path: Path) -> Path:
    """Create a source tree with a module and a package."""
    root = tmp_path / "src"
    package = root / "sample_app"
    package.mkdir(parents=True)

    (package / "__init__.py").write_text('"""Sample package."""\n')
    (package / "utils.py").write_text(SAMPLE_MODULE)

    return root


@pytest.fixture
def request_snapshot() -> RequestSnapshot:
    """A request with a value in every table."""
    return RequestSnapshot(
        url="http://testserver/except/42?verbose=1",
        scheme="http",
        method="GET",
        protocol="HTTP/1.1",
        remote_address="127.0.0.1",
        headers={"host": "testserver", "user-agent": "pytest"},
        route_params={"p": "42"},
        query_params={"verbose": "1"},
        session_attributes={"hello": "person"},
        attributes={"hello": "world"},
        cookies={"session": "abc"},
    )


@pytest.fixture
def response() -> RecordingResponse:
    """A fresh recording response sink."""
    return RecordingResponse()
