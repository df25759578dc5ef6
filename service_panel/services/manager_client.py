from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

import httpx

from service_panel.constants import API_URL, REQUEST_TIMEOUT_S
from service_panel.state import CommandVerb, ServiceInfo, StatusSnapshot


class StatusError(RuntimeError):
    """Raised when a status snapshot cannot be obtained."""


class FetchError(StatusError):
    """The manager was unreachable or answered /status with a non-success code."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ParseError(StatusError):
    """The /status payload was not valid JSON of the expected shape."""


def _parse_service(name: str, entry: Any) -> ServiceInfo:
    if not isinstance(entry, Mapping):
        raise ParseError(f"status entry for {name!r} is not an object")
    running = entry.get("running")
    if not isinstance(running, bool):
        raise ParseError(f"status entry for {name!r} has no boolean 'running'")

    provides = entry.get("provides_endpoints") or {}
    if not isinstance(provides, Mapping) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in provides.items()
    ):
        raise ParseError(f"status entry for {name!r} has malformed 'provides_endpoints'")

    required = entry.get("required_endpoints") or []
    if not isinstance(required, list) or not all(isinstance(r, str) for r in required):
        raise ParseError(f"status entry for {name!r} has malformed 'required_endpoints'")

    return ServiceInfo(
        running=running,
        provides_endpoints=dict(provides),
        required_endpoints=tuple(required),
    )


def parse_snapshot(payload: Any) -> StatusSnapshot:
    """Validate a decoded /status body and convert it into a snapshot."""
    if not isinstance(payload, Mapping):
        raise ParseError("status payload is not an object")
    return {str(name): _parse_service(str(name), entry) for name, entry in payload.items()}


class ManagerClient:
    """Async HTTP client for the service manager's status/control API."""

    def __init__(
        self,
        *,
        base_url: str,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url
        self._client = client or httpx.AsyncClient(
            base_url=base_url,
            transport=transport,
            timeout=timeout,
        )

    def configure(self, base_url: str, timeout: float | None = None) -> None:
        """Retarget the client (used when the CLI overrides the environment)."""
        self.base_url = base_url
        self._client.base_url = base_url
        self._client.timeout = httpx.Timeout(timeout)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch_status(self) -> StatusSnapshot:
        """
        GET /status and return the parsed snapshot.

        Raises:
            FetchError: transport failure or non-success status
            ParseError: body is not JSON or not the documented shape
        """
        try:
            response = await self._client.get("/status")
        except httpx.RequestError as e:
            raise FetchError(str(e) or type(e).__name__) from e

        if not response.is_success:
            raise FetchError(
                f"/status returned {response.status_code}: {response.text.strip()}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise ParseError(f"malformed status JSON: {e}") from e

        snapshot = parse_snapshot(payload)
        logging.debug("Status snapshot: %s", snapshot)
        return snapshot

    async def send_command(self, verb: CommandVerb, name: str) -> httpx.Response:
        """GET /{verb}/{name}; transport failures propagate as httpx.RequestError."""
        return await self._client.get(f"/{verb.value}/{quote(name, safe='')}")

    async def start(self, name: str) -> httpx.Response:
        return await self.send_command(CommandVerb.START, name)

    async def stop(self, name: str) -> httpx.Response:
        return await self.send_command(CommandVerb.STOP, name)


# Module-level singleton instance
client = ManagerClient(base_url=API_URL, timeout=REQUEST_TIMEOUT_S)
