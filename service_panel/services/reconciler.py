from __future__ import annotations

from collections.abc import Mapping

from service_panel.services.endpoints import normalize
from service_panel.state import (
    CommandVerb,
    EndpointView,
    ServiceControl,
    ServiceInfo,
    ServiceViewModel,
    StatusSnapshot,
)

ENDPOINTS_TITLE = "Endpoints:"


def display_name(service_name: str) -> str:
    """worker-pool -> Worker Pool"""
    return " ".join(word[:1].upper() + word[1:] for word in service_name.split("-"))


def _control(info: ServiceInfo, in_flight: CommandVerb | None) -> ServiceControl:
    if in_flight is not None:
        return ServiceControl(verb=in_flight, label=in_flight.pending_label, pending=True)
    verb = CommandVerb.STOP if info.running else CommandVerb.START
    return ServiceControl(verb=verb, label=verb.label)


def render_service(
    name: str, info: ServiceInfo, in_flight: CommandVerb | None = None
) -> ServiceViewModel:
    endpoints = tuple(
        EndpointView(label=label, disposition=normalize(uri))
        for label, uri in info.provides_endpoints.items()
    )
    return ServiceViewModel(
        name=name,
        display_name=display_name(name),
        running=info.running,
        control=_control(info, in_flight),
        endpoints=endpoints,
        endpoints_title=ENDPOINTS_TITLE if info.running and endpoints else None,
        required_endpoints=info.required_endpoints,
    )


def render(
    snapshot: StatusSnapshot, pending: Mapping[str, CommandVerb] | None = None
) -> tuple[ServiceViewModel, ...]:
    """
    Reconcile a status snapshot into the ordered card models of the panel.

    `pending` maps service names to the command currently in flight for them;
    it is the only input besides the snapshot, so the same arguments always
    yield the same sequence.
    """
    pending = pending or {}
    return tuple(
        render_service(name, info, pending.get(name)) for name, info in snapshot.items()
    )
