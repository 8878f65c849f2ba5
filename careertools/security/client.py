"""
client.py — Best-effort client address resolution behind proxies.

Shared by the Request Gate and both rate limiters so a client is keyed
identically everywhere.
"""

from typing import Iterable

from starlette.requests import Request

# Checked in order; the first usable address wins.
_FORWARDING_HEADERS = ("x-vercel-forwarded-for", "x-forwarded-for", "x-real-ip")


def resolve_client_address(request: Request, trusted_proxies: Iterable[str] = ()) -> str:
    """
    Return the originating client IP for *request*.

    Forwarding headers may list a chain of hops ("client, proxy1, proxy2").
    The first hop that is not one of our own trusted proxies is taken.
    Falls back to the transport peer address, then to "unknown".
    """
    trusted = set(trusted_proxies)
    for header in _FORWARDING_HEADERS:
        value = request.headers.get(header)
        if not value:
            continue
        for hop in value.split(","):
            hop = hop.strip()
            if hop and hop != "unknown" and hop not in trusted:
                return hop

    if request.client is not None and request.client.host:
        return request.client.host
    return "unknown"
