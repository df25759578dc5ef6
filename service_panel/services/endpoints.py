from __future__ import annotations

import re

from service_panel.state import EndpointAction, EndpointDisposition

_TCP_PREFIX = "tcp://"
_LOCAL_HOST_RE = re.compile(
    r"^(https?://)?(?:0\.0\.0\.0|127\.0\.0\.1)(?=[:/?#]|$)", re.IGNORECASE
)
_HTTP_RE = re.compile(r"^https?://", re.IGNORECASE)
# Any other explicit scheme (grpc://, ws://, ...) is kept as-is
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*://")


def canonicalize(raw: str) -> str:
    """Rewrite a raw endpoint reported by the manager into a browsable address."""
    url = raw
    while url.startswith(_TCP_PREFIX):
        url = url[len(_TCP_PREFIX):]
    url =_LOCAL_HOST_RE.sub(lambda m: f"{m.group(1) or ''}localhost", url, count=1)
    if not _SCHEME_RE.match(url):
        url = "http://" + url
    return url


def normalize(raw: str) -> EndpointDisposition:
    """
    Canonicalize an endpoint and decide how the panel exposes it.

    HTTP(S) addresses open as links; anything else is offered as a
    copy-to-clipboard button carrying the canonical form.
    """
    url = canonicalize(raw)
    action = (
        EndpointAction.OPEN_LINK if _HTTP_RE.match(url) else EndpointAction.COPY_TO_CLIPBOARD
    )
    return EndpointDisposition(canonical_url=url, action=action)
