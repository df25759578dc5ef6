import argparse
import logging
import sys

from nicegui import app as ng_app
from nicegui import ui

from service_panel.common.logging_config import configure_logging
from service_panel.common.theme import apply_theme, get_theme, inject_layout_css
from service_panel.constants import (
    API_URL,
    APP_TITLE,
    LOG_LEVEL,
    POLL_INTERVAL_S,
    REQUEST_TIMEOUT_S,
    SERVER_HOST,
    SERVER_PORT,
)
from service_panel.pages.panel import ControlPanelPage
from service_panel.services.manager_client import client

# Runtime configuration (resolved later from CLI/env)
RUNTIME_POLL_INTERVAL_S = POLL_INTERVAL_S


@ui.page("/")
async def index() -> None:
    apply_theme(get_theme())
    ui.query(".nicegui-content").classes("p-0")
    inject_layout_css()

    panel = ControlPanelPage(poll_interval=RUNTIME_POLL_INTERVAL_S)
    panel.build()
    await panel.refresh()


async def _app_shutdown() -> None:
    await client.aclose()


ng_app.on_shutdown(_app_shutdown)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=f"{APP_TITLE} (NiceGUI)")
    parser.add_argument("--host", default=SERVER_HOST, help="Webserver bind host")
    parser.add_argument("--port", type=int, default=SERVER_PORT, help="Webserver bind port")
    parser.add_argument(
        "--api-url", default=API_URL, help="Base URL of the service manager control API"
    )
    parser.add_argument(
        "--poll-interval",
        type=float,
        default=POLL_INTERVAL_S,
        help="Seconds between status polls (0 disables polling)",
    )
    parser.add_argument(
        "--request-timeout",
        type=float,
        default=REQUEST_TIMEOUT_S,
        help="Timeout for manager requests in seconds (default: none)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set log level",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity; -v=INFO, -vv=DEBUG",
    )
    parser.add_argument("-q", "--quiet", action="store_true", help="Enable WARNING logging")
    args, _ = parser.parse_known_args(argv)
    return args


def resolve_log_level(args: argparse.Namespace) -> int:
    """Explicit --log-level > -v/-q > env default from constants."""
    if args.log_level:
        return getattr(logging, args.log_level)
    if args.verbose >= 2:
        return logging.DEBUG
    if args.verbose == 1:
        return logging.INFO
    if args.quiet:
        return logging.WARNING
    return LOG_LEVEL


def run(argv: list[str] | None = None) -> None:
    global RUNTIME_POLL_INTERVAL_S
    args = parse_args(argv)

    RUNTIME_POLL_INTERVAL_S = max(0.0, float(args.poll_interval))
    client.configure(args.api_url.rstrip("/"), timeout=args.request_timeout)

    configure_logging(resolve_log_level(args))
    logging.info(f"Webserver bind: host={args.host} port={args.port}")
    logging.info(f"Service manager: {client.base_url}")

    ui.run(
        title=APP_TITLE,
        host=args.host,
        port=int(args.port),
        reload=False,
        show=False,
        loop="uvloop" if sys.platform != "win32" else "asyncio",
        http="httptools",
    )


if __name__ in {"__main__", "__mp_main__"}:
    run()
