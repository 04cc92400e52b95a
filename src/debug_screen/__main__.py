"""Example server showing the debug screen.

Run it and open http://127.0.0.1:8080/except/anything to see the page:

    python -m debug_screen --port 8080

Routes:
- ``/``: stores a session value and answers "Hello!"
- ``/except/{p}``: stores a request attribute and raises
"""

import argparse
import sys
from pathlib import Path

import structlog
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.sessions import SessionMiddleware
from starlette.requests import Request
from starlette.responses import PlainTextResponse
from starlette.routing import Route

from debug_screen._version import __version__
from debug_screen.adapters.starlette import enable_debug_screen
from debug_screen.config.schema import DebugScreenConfig
from debug_screen.utils.logging import LogEventNames, configure_logging

log = structlog.get_logger()


class ExampleError(Exception):
    """Raised by the example route."""


async def hello(request: Request) -> PlainTextResponse:
    request.session["hello"] = "person"
    return PlainTextResponse("Hello!")


async def fail(request: Request) -> PlainTextResponse:
    request.state.hello = "world"
    try:
        int(request.path_params["p"])
    except ValueError as e:
        raise ExampleError("Testing Handler!") from e
    raise ExampleError("Testing Handler!")


def create_example_app(config: DebugScreenConfig | None = None) -> Starlette:
    """Build the example application with the debug screen enabled."""
    app = Starlette(
        routes=[
            Route("/", hello),
            Route("/except/{p}", fail),
        ],
        middleware=[Middleware(SessionMiddleware, secret_key="debug-screen-example")],
    )
    enable_debug_screen(app, config=config)
    return app


def parse_args() -> argparse.Namespace:
    """Parse command line arguments.

    Returns:
        Parsed argument namespace
    """
    parser = argparse.ArgumentParser(
        prog="debug-screen",
        description="Example server for the in-browser debug screen",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Path to a YAML configuration file (default: environment only)",
    )

    parser.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8080, help="Bind port (default: 8080)")

    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "--format",
        choices=["json", "console"],
        default="console",
        help="Log output format (default: console)",
    )

    return parser.parse_args()


def main() -> int:
    """Main entry point."""
    args = parse_args()

    configure_logging(level="DEBUG" if args.debug else "INFO", log_format=args.format)

    try:
        if args.config is not None:
            from debug_screen.config.loader import load_config

            config = load_config(args.config)

            # Reconfigure logging from config file settings
            configure_logging(
                level="DEBUG" if args.debug else config.logging.level,
                log_format=config.logging.format,
                file_path=config.logging.file.path if config.logging.file.enabled else None,
                file_enabled=config.logging.file.enabled,
            )
        else:
            config = DebugScreenConfig()
    except FileNotFoundError as e:
        log.error(LogEventNames.CONFIGURATION_FILE_NOT_FOUND, path=str(args.config), error=str(e))
        return 1
    except ValueError as e:
        log.error(LogEventNames.CONFIGURATION_INVALID, error=str(e))
        return 1

    log.info(LogEventNames.CONFIGURATION_LOADED, dev=config.dev)

    import uvicorn

    app = create_example_app(config)
    log.info(LogEventNames.SERVER_STARTING, host=args.host, port=args.port)
    uvicorn.run(app, host=args.host, port=args.port, log_config=None)
    return 0


if __name__ == "__main__":
    sys.exit(main())
