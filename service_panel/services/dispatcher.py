from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from types import MappingProxyType
from typing import Protocol

import httpx

from service_panel.services.manager_client import ManagerClient
from service_panel.state import CommandResult, CommandVerb, Failure, NetworkError, Success


class Notifier(Protocol):
    def show(self, text: str) -> object: ...


class CommandDispatcher:
    """
    Sends start/stop commands to the manager and interprets the outcome.

    The result is never applied to the view directly: every command, whatever
    its outcome, is followed by exactly one refresh, which is how success
    becomes visible.
    """

    def __init__(
        self,
        client: ManagerClient,
        notifications: Notifier,
        refresh: Callable[[], Awaitable[None]],
        on_pending_change: Callable[[], None] | None = None,
    ) -> None:
        self.client = client
        self.notifications = notifications
        self._refresh = refresh
        self._on_pending_change = on_pending_change
        self._pending: dict[str, CommandVerb] = {}

    @property
    def pending(self) -> Mapping[str, CommandVerb]:
        return MappingProxyType(self._pending)

    def is_pending(self, name: str) -> bool:
        return name in self._pending

    async def start(self, name: str) -> CommandResult | None:
        return await self.dispatch(CommandVerb.START, name)

    async def stop(self, name: str) -> CommandResult | None:
        return await self.dispatch(CommandVerb.STOP, name)

    async def dispatch(self, verb: CommandVerb, name: str) -> CommandResult | None:
        """Run one command; returns None when one is already in flight for `name`."""
        if name in self._pending:
            logging.debug(
                "Ignoring %s %s: %s already in flight", verb.value, name, self._pending[name].value
            )
            return None

        self._set_pending(name, verb)
        try:
            result = await self._send(verb, name)
            self._report(verb, name, result)
        finally:
            # The marker outlives the refresh so a stale card never re-offers the command
            try:
                await self._refresh()
            finally:
                self._clear_pending(name)
        return result

    async def _send(self, verb: CommandVerb, name: str) -> CommandResult:
        try:
            response = await self.client.send_command(verb, name)
        except httpx.RequestError as e:
            return NetworkError(message=str(e) or type(e).__name__)
        if response.is_success:
            return Success(status_code=response.status_code)
        return Failure(http_status=response.status_code, body=response.text.strip())

    def _report(self, verb: CommandVerb, name: str, result: CommandResult) -> None:
        if isinstance(result, Success):
            logging.info("Successfully %s %s (%s)", _past(verb), name, result.status_code)
            return
        detail = result.body if isinstance(result, Failure) else result.message
        message = f"Error {verb.gerund} service {name}: {detail}"
        logging.error("%s", message)
        self.notifications.show(message)

    def _set_pending(self, name: str, verb: CommandVerb) -> None:
        self._pending[name] = verb
        self._pending_changed()

    def _clear_pending(self, name: str) -> None:
        self._pending.pop(name, None)
        self._pending_changed()

    def _pending_changed(self) -> None:
        if self._on_pending_change is None:
            return
        try:
            self._on_pending_change()
        except Exception as e:
            logging.error("Pending redraw failed: %s", e)


def _past(verb: CommandVerb) -> str:
    return "started" if verb is CommandVerb.START else "stopped"
