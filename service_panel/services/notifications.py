from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Protocol

from service_panel.constants import NOTIFICATION_DURATION_S
from service_panel.state import Notification


class NotificationSink(Protocol):
    """Renders notifications; the handle returned by display() is passed back to retract()."""

    def display(self, notification: Notification) -> Any: ...

    def retract(self, handle: Any) -> None: ...


class NotificationManager:
    """
    Owns the single transient message slot of a page.

    Empty -> Visible -> Empty. A new show() retires the current notification
    (timer first, then its element) before installing the next one, so the
    last writer wins and nothing is queued.
    """

    def __init__(self, sink: NotificationSink, duration: float = NOTIFICATION_DURATION_S) -> None:
        self._sink = sink
        self.duration = duration
        self._current: Notification | None = None
        self._handle: Any = None
        self._timer: asyncio.TimerHandle | None = None

    @property
    def current(self) -> Notification | None:
        return self._current

    @property
    def is_visible(self) -> bool:
        return self._current is not None

    def show(self, text: str) -> Notification:
        """Display `text`, replacing whatever is visible, and schedule its auto-dismiss."""
        self._retire()
        notification = Notification(text=text, created_at=time.time())
        self._handle = self._sink.display(notification)
        self._current = notification
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.duration, self._expire, notification)
        logging.debug("Notification shown: %s", text)
        return notification

    def dismiss_all(self) -> None:
        self._retire()

    def _expire(self, notification: Notification) -> None:
        # Only the notification this timer was scheduled for may be cleared
        if self._current is notification:
            self._timer = None
            self._retire()

    def _retire(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._current is None:
            return
        handle, self._handle, self._current = self._handle, None, None
        try:
            self._sink.retract(handle)
        except Exception as e:
            logging.debug("Notification retract failed: %s", e)
