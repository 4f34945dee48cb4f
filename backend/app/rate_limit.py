"""Rate limiting for the gigboard backend.

Requests are keyed by client IP. ``X-Forwarded-For`` is honoured only when
the direct peer is a trusted proxy, so clients cannot pick their own key.
"""

import ipaddress
import os
from functools import lru_cache

from slowapi import Limiter
from slowapi.util import get_remote_address

from .logging_config import get_logger

logger = get_logger("gigboard.rate_limit")

# Per-route budgets
READ_LIMIT = "60/minute"
WRITE_LIMIT = "20/minute"

# Override with TRUSTED_PROXY_CIDRS (comma-separated)
DEFAULT_TRUSTED_CIDRS = ("10.0.0.0/8", "172.16.0.0/12", "192.168.0.0/16", "127.0.0.0/8", "::1/128")


@lru_cache
def trusted_networks() -> tuple:
    raw = os.environ.get("TRUSTED_PROXY_CIDRS", "")
    cidrs = [c.strip() for c in raw.split(",") if c.strip()] or DEFAULT_TRUSTED_CIDRS
    networks = []
    for cidr in cidrs:
        try:
            networks.append(ipaddress.ip_network(cidr, strict=False))
        except ValueError:
            logger.warning(f"Ignoring invalid trusted proxy CIDR: {cidr}")
    return tuple(networks)


def is_trusted_proxy(ip: str) -> bool:
    try:
        addr = ipaddress.ip_address(ip)
    except ValueError:
        return False
    return any(addr in network for network in trusted_networks())


def get_client_ip(request) -> str:
    """Client IP, taking the leftmost forwarded address behind a trusted proxy."""
    peer = get_remote_address(request)
    if is_trusted_proxy(peer):
        forwarded = request.headers.get("x-forwarded-for", "")
        client_ip = forwarded.split(",")[0].strip()
        if client_ip:
            return client_ip
    return peer


limiter = Limiter(key_func=get_client_ip)
