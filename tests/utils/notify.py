from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from service_panel.state import Notification

# Short auto-dismiss so timer behaviour can be observed quickly
TEST_NOTIFICATION_DURATION_S = 0.05


class RecordingSink:
    """Notification sink that records what is on screen and what was taken down."""

    def __init__(self) -> None:
        self.visible: list[str] = []
        self.displayed: list[str] = []
        self.retracted: list[str] = []

    def display(self, notification: Notification) -> Notification:
        self.visible.append(notification.text)
        self.displayed.append(notification.text)
        return notification

    def retract(self, handle: Notification) -> None:
        self.visible.remove(handle.text)
        self.retracted.append(handle.text)
