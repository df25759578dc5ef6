from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType


@dataclass(frozen=True)
class ServiceInfo:
    running: bool = False
    provides_endpoints: Mapping[str, str] = field(default_factory=dict)
    required_endpoints: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # Freeze the endpoint map so a snapshot can never be patched in place
        object.__setattr__(
            self, "provides_endpoints", MappingProxyType(dict(self.provides_endpoints))
        )


# Service name -> info, in the order the manager returned them
StatusSnapshot = Mapping[str, ServiceInfo]


class CommandVerb(Enum):
    START = "start"
    STOP = "stop"

    @property
    def label(self) -> str:
        return "Start" if self is CommandVerb.START else "Stop"

    @property
    def pending_label(self) -> str:
        return f"{self.gerund.capitalize()}..."

    @property
    def gerund(self) -> str:
        return "starting" if self is CommandVerb.START else "stopping"


@dataclass(frozen=True)
class Success:
    status_code: int = 200


@dataclass(frozen=True)
class Failure:
    http_status: int
    body: str


@dataclass(frozen=True)
class NetworkError:
    message: str


CommandResult = Success | Failure | NetworkError


@dataclass(frozen=True)
class Notification:
    text: str
    created_at: float


class EndpointAction(Enum):
    OPEN_LINK = "open"
    COPY_TO_CLIPBOARD = "copy"


@dataclass(frozen=True)
class EndpointDisposition:
    canonical_url: str
    action: EndpointAction


@dataclass(frozen=True)
class EndpointView:
    label: str
    disposition: EndpointDisposition


@dataclass(frozen=True)
class ServiceControl:
    """Start/stop affordance of a card."""

    verb: CommandVerb
    label: str
    pending: bool = False

    @property
    def enabled(self) -> bool:
        return not self.pending


@dataclass(frozen=True)
class ServiceViewModel:
    name: str
    display_name: str
    running: bool
    control: ServiceControl
    endpoints: tuple[EndpointView, ...] = ()
    endpoints_title: str | None = None
    required_endpoints: tuple[str, ...] = ()

    @property
    def state(self) -> str:
        return "running" if self.running else "stopped"
