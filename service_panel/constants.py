from __future__ import annotations

import logging
import os

APP_TITLE = "Service Control Panel"

# Service manager control API (what the panel talks to)
API_URL: str = os.getenv("PANEL_API_URL", "http://127.0.0.1:8080").rstrip("/")
# Webserver bind (NiceGUI host/port)
SERVER_HOST: str = os.getenv("PANEL_SERVER_IP", "0.0.0.0")
SERVER_PORT: int = int(os.getenv("PANEL_SERVER_PORT", "8090"))

# Seconds between status polls; 0 refreshes only on load, on demand and after commands
POLL_INTERVAL_S: float = float(os.getenv("PANEL_POLL_INTERVAL", "0"))


def _resolve_request_timeout() -> float | None:
    s = os.getenv("PANEL_REQUEST_TIMEOUT")
    if not s:
        return None
    return float(s)


# None: requests to the manager never time out
REQUEST_TIMEOUT_S: float | None = _resolve_request_timeout()

# Auto-dismiss delay of the transient message
NOTIFICATION_DURATION_S: float = 3.0


def _resolve_log_level() -> int:
    s = os.getenv("PANEL_LOG_LEVEL")
    if s:
        name = s.strip().upper()
        mapping = {
            "DEBUG": logging.DEBUG,
            "INFO": logging.INFO,
            "WARNING": logging.WARNING,
            "ERROR": logging.ERROR,
            "CRITICAL": logging.CRITICAL,
        }
        return mapping.get(name, logging.WARNING)
    else:
        return logging.WARNING


LOG_LEVEL: int = _resolve_log_level()
