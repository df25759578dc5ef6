from __future__ import annotations

import asyncio

import httpx
import pytest

from service_panel.services.dispatcher import CommandDispatcher
from service_panel.services.reconciler import render
from service_panel.state import CommandVerb, Failure, NetworkError, ServiceInfo, Success


class RefreshCounter:
    def __init__(self) -> None:
        self.count = 0

    async def __call__(self) -> None:
        self.count += 1


@pytest.mark.unit
async def test_success_is_logged_only_and_refreshes_once(make_manager, notifications, sink):
    manager = make_manager(lambda request: httpx.Response(200, text="ok"))
    refresh = RefreshCounter()
    dispatcher = CommandDispatcher(manager, notifications, refresh)

    result = await dispatcher.start("worker-pool")

    assert result == Success(status_code=200)
    assert sink.displayed == []
    assert refresh.count == 1
    assert not dispatcher.is_pending("worker-pool")


@pytest.mark.unit
async def test_http_failure_notifies_with_body_and_refreshes_once(
    make_manager, notifications, sink
):
    manager = make_manager(lambda request: httpx.Response(500, text="busy"))
    refresh = RefreshCounter()
    dispatcher = CommandDispatcher(manager, notifications, refresh)

    result = await dispatcher.stop("X")

    assert result == Failure(http_status=500, body="busy")
    assert sink.visible == ["Error stopping service X: busy"]
    assert refresh.count == 1


@pytest.mark.unit
async def test_transport_error_notifies_with_message_and_refreshes_once(
    make_manager, notifications, sink
):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    refresh = RefreshCounter()
    dispatcher = CommandDispatcher(make_manager(handler), notifications, refresh)

    result = await dispatcher.start("svc")

    assert result == NetworkError(message="connection refused")
    assert sink.visible == ["Error starting service svc: connection refused"]
    assert refresh.count == 1


@pytest.mark.unit
async def test_refresh_runs_even_when_sending_blows_up(notifications):
    class ExplodingClient:
        async def send_command(self, verb, name):
            raise RuntimeError("boom")

    refresh = RefreshCounter()
    dispatcher = CommandDispatcher(ExplodingClient(), notifications, refresh)  # type: ignore[arg-type]

    with pytest.raises(RuntimeError):
        await dispatcher.start("svc")
    assert refresh.count == 1
    assert not dispatcher.is_pending("svc")


@pytest.mark.unit
async def test_in_flight_command_marks_pending_and_blocks_duplicates(
    make_manager, notifications
):
    release = asyncio.Event()
    requests: list[str] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request.url.path)
        await release.wait()
        return httpx.Response(200)

    redraws: list[dict[str, CommandVerb]] = []
    refresh = RefreshCounter()
    dispatcher = CommandDispatcher(
        make_manager(handler),
        notifications,
        refresh,
        on_pending_change=lambda: redraws.append(dict(dispatcher.pending)),
    )

    task = asyncio.create_task(dispatcher.start("svc"))
    await asyncio.sleep(0.01)

    assert dispatcher.is_pending("svc")
    (vm,) = render({"svc": ServiceInfo(running=False)}, dispatcher.pending)
    assert vm.control.label == "Starting..."
    assert not vm.control.enabled

    assert await dispatcher.stop("svc") is None
    assert requests == ["/start/svc"]

    release.set()
    assert await task == Success(status_code=200)
    assert redraws == [{"svc": CommandVerb.START}, {}]
    assert refresh.count == 1


@pytest.mark.unit
async def test_commands_for_different_services_run_side_by_side(make_manager, notifications):
    release = asyncio.Event()

    async def handler(request: httpx.Request) -> httpx.Response:
        await release.wait()
        return httpx.Response(200)

    refresh = RefreshCounter()
    dispatcher = CommandDispatcher(make_manager(handler), notifications, refresh)

    tasks = [
        asyncio.create_task(dispatcher.start("a")),
        asyncio.create_task(dispatcher.stop("b")),
    ]
    await asyncio.sleep(0.01)
    assert dict(dispatcher.pending) == {"a": CommandVerb.START, "b": CommandVerb.STOP}

    release.set()
    await asyncio.gather(*tasks)
    assert dict(dispatcher.pending) == {}
    assert refresh.count == 2


@pytest.mark.unit
async def test_duplicate_during_follow_up_refresh_is_ignored(make_manager, notifications):
    requests: list[str] = []
    refresh_started = asyncio.Event()
    release_refresh = asyncio.Event()
    controls = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request.url.path)
        return httpx.Response(200)

    async def slow_refresh() -> None:
        # Stale snapshot still says stopped while /status is in flight
        (vm,) = render({"svc": ServiceInfo(running=False)}, dispatcher.pending)
        controls.append(vm.control)
        refresh_started.set()
        await release_refresh.wait()

    dispatcher = CommandDispatcher(make_manager(handler), notifications, slow_refresh)

    task = asyncio.create_task(dispatcher.start("svc"))
    await refresh_started.wait()

    assert dispatcher.is_pending("svc")
    assert controls[0].label == "Starting..."
    assert not controls[0].enabled
    assert await dispatcher.start("svc") is None

    release_refresh.set()
    assert await task == Success(status_code=200)
    assert requests == ["/start/svc"]
    assert not dispatcher.is_pending("svc")
