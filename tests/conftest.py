from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import pytest

from service_panel.services.manager_client import ManagerClient
from service_panel.services.notifications import NotificationManager
from tests.utils.notify import TEST_NOTIFICATION_DURATION_S, RecordingSink

pytest_plugins = ["nicegui.testing.user_plugin"]


if TYPE_CHECKING:
    from collections.abc import Callable


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def notifications(sink: RecordingSink) -> NotificationManager:
    return NotificationManager(sink, duration=TEST_NOTIFICATION_DURATION_S)


@pytest.fixture
def make_manager() -> Callable[[Callable[[httpx.Request], object]], ManagerClient]:
    """Build a ManagerClient whose requests are answered by `handler`."""

    def _make(handler: Callable[[httpx.Request], object]) -> ManagerClient:
        return ManagerClient(
            base_url="http://manager.test",
            transport=httpx.MockTransport(handler),  # type: ignore[arg-type]
        )

    return _make
