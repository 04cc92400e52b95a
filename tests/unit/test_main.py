"""Tests for the example server."""

from pathlib import Path

import pytest
from starlette.testclient import TestClient

from debug_screen.__main__ import create_example_app, main, parse_args
from debug_screen.config.schema import DebugScreenConfig


@pytest.fixture
def client() -> TestClient:
    """Client for the example application."""
    return TestClient(
        create_example_app(DebugScreenConfig()),
        raise_server_exceptions=False,
    )


class TestExampleApp:
    """Tests for the example routes."""

    def test_hello(self, client: TestClient) -> None:
        """Test the index route answers normally."""
        response = client.get("/")

        assert response.status_code == 200
        assert response.text == "Hello!"

    def test_except_route_shows_debug_screen(self, client: TestClient) -> None:
        """Test the failing route renders the page with its request data."""
        client.get("/")
        response = client.get("/except/abc")

        page = response.text
        assert response.status_code == 500
        assert response.headers["content-type"] == "text/html; charset=UTF-8"
        assert "ExampleError" in page
        assert "Testing Handler!" in page
        assert "<th>hello</th><td>person</td>" in page
        assert "<th>hello</th><td>world</td>" in page
        assert "<th>p</th><td>abc</td>" in page

    def test_non_numeric_parameter_shows_cause(self, client: TestClient) -> None:
        """Test the ValueError cause is listed after the raised error."""
        page = client.get("/except/abc").text

        assert page.index("ExampleError") < page.index("invalid literal for int()")

    def test_numeric_parameter_has_no_cause(self, client: TestClient) -> None:
        """Test a numeric parameter raises without a chained cause."""
        page = client.get("/except/42").text

        assert "Testing Handler!" in page
        assert "invalid literal for int()" not in page

    def test_screen_uses_configured_locators(self) -> None:
        """Test the example app honours the configured source roots."""
        app = create_example_app(DebugScreenConfig(source_roots=[Path("./example_src")]))

        handler = app.exception_handlers[Exception]

        assert [repr(locator) for locator in handler.screen.source_locators] == [
            "LocalSourceLocator('example_src')"
        ]


class TestParseArgs:
    """Tests for command line parsing."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the default host, port and logging options."""
        monkeypatch.setattr("sys.argv", ["debug-screen"])

        args = parse_args()

        assert args.host == "127.0.0.1"
        assert args.port == 8080
        assert args.config is None
        assert args.debug is False
        assert args.format == "console"

    def test_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test every option can be overridden."""
        monkeypatch.setattr(
            "sys.argv",
            ["debug-screen", "-c", "conf.yaml", "--host", "0.0.0.0", "--port", "9000", "-d", "--format", "json"],
        )

        args = parse_args()

        assert args.config == Path("conf.yaml")
        assert args.host == "0.0.0.0"
        assert args.port == 9000
        assert args.debug is True
        assert args.format == "json"


class TestMain:
    """Tests for the main entry point."""

    def test_missing_config_file(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Test a missing configuration file exits with status 1."""
        monkeypatch.setattr("sys.argv", ["debug-screen", "-c", str(tmp_path / "absent.yaml")])

        assert main() == 1

    def test_invalid_config_file(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Test an invalid configuration file exits with status 1."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("context_lines: 0\n")
        monkeypatch.setattr("sys.argv", ["debug-screen", "-c", str(config_file)])

        assert main() == 1

    def test_starts_server(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Test the server is started with the parsed host and port."""
        calls: list[dict[str, object]] = []

        def fake_run(app: object, **kwargs: object) -> None:
            calls.append({"app": app, **kwargs})

        config_file = tmp_path / "config.yaml"
        config_file.write_text("context_lines: 3\n")
        monkeypatch.setattr("uvicorn.run", fake_run)
        monkeypatch.setattr(
            "sys.argv", ["debug-screen", "-c", str(config_file), "--port", "9001"]
        )

        assert main() == 0
        assert calls[0]["host"] == "127.0.0.1"
        assert calls[0]["port"] == 9001
        assert calls[0]["log_config"] is None
