"""IP allowlist guard for the generation endpoint.

A caller passes the guard either by presenting an API key (header
`X-API-Key` or query parameter `apiKey`) or by connecting from an address
in the configured allowlist. Client addresses are resolved from proxy
headers first, then from the socket peer.
"""

from __future__ import annotations

import ipaddress
import logging
from collections.abc import Mapping

from .errors import ForbiddenError

logger = logging.getLogger("commit-gateway.access")

API_KEY_HEADER = "X-API-Key"
API_KEY_QUERY_PARAM = "apiKey"
UNKNOWN_IP = "unknown"


def _is_ip(value: str) -> bool:
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


def clean_ip(value: str) -> str | None:
    """Normalize an address literal, returning None when it is not an IP.

    Accepts `[v6]`, `[v6]:port`, bare v6, `v4` and `v4:port`.
    """
    value = value.strip()
    if not value:
        return None

    start, end = value.find("["), value.find("]")
    if start != -1 and end > start:
        candidate = value[start + 1 : end]
        if _is_ip(candidate):
            return candidate

    if ":" in value and _is_ip(value):
        return value

    host, sep, _port = value.rpartition(":")
    if sep:
        value = host

    return value if _is_ip(value) else None


def _forwarded_for(value: str) -> str | None:
    idx = value.lower().find("for=")
    if idx == -1:
        return None
    rest = value[idx + len("for=") :]
    for stop in (";", ","):
        rest = rest.split(stop, 1)[0]
    return clean_ip(rest.strip().strip('"'))


def client_ip(headers: Mapping[str, str], remote_addr: str | None = None) -> str:
    """Resolve the caller's IP from proxy headers, falling back to the peer address."""
    forwarded = headers.get("forwarded")
    if forwarded:
        ip = _forwarded_for(forwarded)
        if ip:
            return ip

    for header in ("x-forwarded-for", "x-real-ip"):
        value = headers.get(header)
        if not value:
            continue
        for entry in value.split(","):
            ip = clean_ip(entry)
            if ip:
                return ip

    if remote_addr:
        ip = clean_ip(remote_addr)
        if ip:
            return ip

    return UNKNOWN_IP


def parse_allowlist(raw: str) -> frozenset[str]:
    return frozenset(entry.strip() for entry in raw.split(",") if entry.strip())


class AccessGuard:
    """Gate requests on an API key or an allowlisted client IP."""

    def __init__(self, allowed_ips: str) -> None:
        self.allowed_ips = parse_allowlist(allowed_ips)

    def check(
        self,
        headers: Mapping[str, str],
        query_params: Mapping[str, str],
        remote_addr: str | None = None,
    ) -> None:
        """Raise ForbiddenError unless the request has a key or comes from an allowed IP."""
        api_key = headers.get(API_KEY_HEADER.lower()) or query_params.get(API_KEY_QUERY_PARAM)
        if api_key:
            return

        ip = client_ip(headers, remote_addr)
        if ip not in self.allowed_ips:
            logger.info("Unauthorized access attempt from ip=%s", ip, extra={"ip": ip})
            raise ForbiddenError()
