from __future__ import annotations

import logging
from functools import partial

from nicegui import ui

from service_panel.common.logging_config import attach_ui_log, detach_ui_log
from service_panel.common.theme import toggle_theme
from service_panel.constants import APP_TITLE, NOTIFICATION_DURATION_S, POLL_INTERVAL_S
from service_panel.services.dispatcher import CommandDispatcher
from service_panel.services.manager_client import StatusError, client
from service_panel.services.notifications import NotificationManager
from service_panel.services.reconciler import render
from service_panel.state import (
    CommandVerb,
    EndpointAction,
    EndpointView,
    Notification,
    ServiceViewModel,
    StatusSnapshot,
)


class PopupSink:
    """Mounts notifications as labels inside the page's overlay layer."""

    def __init__(self) -> None:
        self.layer: ui.element | None = None

    def display(self, notification: Notification) -> ui.label | None:
        if self.layer is None:
            return None
        with self.layer:
            return ui.label(notification.text).classes("popup").mark("popup")

    def retract(self, handle: ui.label | None) -> None:
        if handle is not None:
            handle.delete()


class ControlPanelPage:
    """The service control panel: one card per managed service."""

    def __init__(self, poll_interval: float = POLL_INTERVAL_S) -> None:
        self.client = client
        self.poll_interval = poll_interval
        self.snapshot: StatusSnapshot | None = None
        self.cards: ui.element | None = None
        self.log: ui.log | None = None
        self.poll_timer: ui.timer | None = None
        self._sink = PopupSink()
        self.notifications = NotificationManager(self._sink, duration=NOTIFICATION_DURATION_S)
        self.dispatcher = CommandDispatcher(
            self.client,
            self.notifications,
            refresh=self.refresh,
            on_pending_change=self.redraw,
        )

    # ---- Status ----

    async def refresh(self) -> None:
        """Fetch a snapshot and redraw; on failure the current cards stay as they are."""
        try:
            snapshot = await self.client.fetch_status()
        except StatusError as e:
            logging.error("Status fetch failed: %s", e)
            self.notifications.show(f"Error fetching status: {e}")
            return
        self.snapshot = snapshot
        self.redraw()

    def redraw(self) -> None:
        if self.snapshot is None or self.cards is None:
            return
        self._draw_cards(render(self.snapshot, self.dispatcher.pending))

    # ---- Actions ----

    async def _run_command(self, verb: CommandVerb, name: str) -> None:
        try:
            await self.dispatcher.dispatch(verb, name)
        except Exception as e:
            logging.error("%s %s failed: %s", verb.label, name, e)
            self.notifications.show(f"Error {verb.gerund} service {name}: {e}")

    def _copy(self, text: str) -> None:
        ui.clipboard.write(text)
        self.notifications.show(f"Copied {text}")

    # ---- UI ----

    def _draw_endpoint(self, endpoint: EndpointView) -> None:
        url = endpoint.disposition.canonical_url
        if endpoint.disposition.action is EndpointAction.OPEN_LINK:
            ui.link(endpoint.label, url, new_tab=True).classes("text-sm")
        else:
            ui.button(endpoint.label, icon="content_copy", on_click=partial(self._copy, url)).props(
                "flat dense no-caps"
            ).tooltip(url).mark(f"copy-{endpoint.label}")

    def _draw_card(self, vm: ServiceViewModel) -> None:
        with ui.card().classes(f"service-card {vm.state}"):
            with ui.row().classes("w-full items-center justify-between"):
                ui.label(vm.display_name).classes("title")
                control = vm.control
                button = ui.button(
                    control.label, on_click=partial(self._run_command, control.verb, vm.name)
                ).mark(f"{control.verb.value}-{vm.name}")
                button.props(
                    "outline " + ("color=negative" if control.verb is CommandVerb.STOP else "color=positive")
                )
                if not control.enabled:
                    button.disable()
            ui.label(vm.state.capitalize()).classes("subtitle")
            if vm.endpoints_title:
                ui.label(vm.endpoints_title).classes("subtitle")
            if vm.endpoints:
                with ui.row().classes("items-center gap-2"):
                    for endpoint in vm.endpoints:
                        self._draw_endpoint(endpoint)
            if vm.required_endpoints:
                ui.label(f"Requires: {', '.join(vm.required_endpoints)}").classes("subtitle")

    def _draw_cards(self, models: tuple[ServiceViewModel, ...]) -> None:
        assert self.cards is not None
        self.cards.clear()
        with self.cards:
            if not models:
                ui.label("No services reported").classes("subtitle")
            for vm in models:
                self._draw_card(vm)

    def build(self) -> None:
        with ui.header().classes("items-center justify-between px-4 py-2"):
            ui.label(APP_TITLE).classes("text-lg font-medium")
            with ui.row().classes("items-center gap-2"):
                ui.button(icon="refresh", on_click=self.refresh).props("flat round").tooltip(
                    "Refresh"
                ).mark("refresh")
                ui.button(icon="contrast", on_click=toggle_theme).props("flat round").tooltip(
                    "Toggle theme"
                )

        self.cards = ui.element("div").classes("service-grid p-4")
        self._sink.layer = ui.element("div").classes("popup-layer")

        with ui.expansion("Log", icon="article").classes("w-full px-4"):
            self.log = ui.log(max_lines=200).classes("w-full h-48")
        attach_ui_log(self.log)
        ui.context.client.on_disconnect(self._teardown)

        if self.poll_interval > 0:
            self.poll_timer = ui.timer(self.poll_interval, self.refresh)

    def _teardown(self) -> None:
        self.notifications.dismiss_all()
        if self.log is not None:
            detach_ui_log(self.log)
