"""Client identification for rate limiting.

The limiter key is the client's apparent IP as reported by the proxy in
front of the app. It is best effort and not authenticated: requests carrying
neither header all share the ``"unknown"`` bucket.
"""

from __future__ import annotations

from typing import Mapping

from fastapi import Request

UNKNOWN_CLIENT = "unknown"


def client_ip_from_headers(headers: Mapping[str, str]) -> str:
    """Derive the rate limit key from proxy headers.

    Order: first entry of ``X-Forwarded-For``, then ``X-Real-IP``, then
    ``"unknown"``. Blank values fall through to the next source.

    Args:
        headers: Case-insensitive request headers.

    Returns:
        str: Client identifier.

    Examples:
        >>> client_ip_from_headers({"x-forwarded-for": "203.0.113.7, 10.0.0.1"})
        '203.0.113.7'
        >>> client_ip_from_headers({})
        'unknown'
    """

    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop

    real_ip = headers.get("x-real-ip")
    if real_ip:
        return real_ip

    return UNKNOWN_CLIENT


def get_client_id(request: Request) -> str:
    """FastAPI dependency returning the rate limit key of the request."""

    return client_ip_from_headers(request.headers)
