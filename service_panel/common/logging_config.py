from __future__ import annotations

import logging
import sys
import threading
import weakref

from nicegui import ui

_LEVEL_COLORS = {
    "DEBUG": "\033[36m",  # cyan
    "INFO": "\033[37m",  # light gray
    "WARNING": "\033[33m",  # yellow
    "ERROR": "\033[31m",  # red
    "CRITICAL": "\033[41m",  # red background
}
_RESET = "\033[0m"
_DIM = "\033[2m"


class AnsiColorFormatter(logging.Formatter):
    """Compact HH:MM:SS console format with a coloured level name."""

    def __init__(self, colored: bool = True) -> None:
        super().__init__(
            fmt="%(asctime)s %(levelname)s %(name)s: %(message)s", datefmt="%H:%M:%S"
        )
        self.colored = colored and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        if not self.colored:
            return base
        ts, _, rest = base.partition(" ")
        color = _LEVEL_COLORS.get(record.levelname, "")
        if color:
            rest = rest.replace(record.levelname, f"{color}{record.levelname}{_RESET}", 1)
        return f"{_DIM}{ts}{_RESET} {rest}"


class NiceGuiLogHandler(logging.Handler):
    """Mirror log records into the diagnostics ui.log of every open panel."""

    def __init__(self, level: int = logging.INFO) -> None:
        super().__init__(level=level)
        self.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s", "%H:%M:%S"))
        self._targets: weakref.WeakSet[ui.log] = weakref.WeakSet()
        self._targets_lock = threading.Lock()

    def attach(self, widget: ui.log) -> None:
        with self._targets_lock:
            self._targets.add(widget)

    def detach(self, widget: ui.log) -> None:
        with self._targets_lock:
            self._targets.discard(widget)

    def emit(self, record: logging.LogRecord) -> None:
        with self._targets_lock:
            targets = list(self._targets)
        if not targets:
            return
        msg = self.format(record)
        for widget in targets:
            try:
                widget.push(msg)
            except Exception:
                # Page closed underneath us
                self.detach(widget)


_ui_handler = NiceGuiLogHandler()


def attach_ui_log(log_widget: ui.log) -> None:
    """Register a ui.log widget as a sink for log records."""
    _ui_handler.attach(log_widget)


def detach_ui_log(log_widget: ui.log) -> None:
    _ui_handler.detach(log_widget)


def configure_logging(
    level: int = logging.INFO, use_color: bool = True, add_ui_handler: bool = True
) -> logging.Logger:
    """
    Configure the root logger with a coloured stderr handler and, optionally,
    the in-page log mirror. Safe to call more than once.
    """
    logger = logging.getLogger()
    logger.setLevel(level)

    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        console = logging.StreamHandler(stream=sys.stderr)
        console.setLevel(level)
        console.setFormatter(AnsiColorFormatter(colored=use_color))
        logger.addHandler(console)

    if add_ui_handler and _ui_handler not in logger.handlers:
        _ui_handler.setLevel(level)
        logger.addHandler(_ui_handler)

    return logger
