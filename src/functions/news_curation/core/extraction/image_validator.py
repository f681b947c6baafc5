"""Filter candidate image URLs before they are shown on article cards."""

from __future__ import annotations

import ipaddress
from urllib.parse import urlparse

MIN_URL_LENGTH = 10
MAX_URL_LENGTH = 2000

_ALLOWED_SCHEMES = ("http", "https")

_PRIVATE_NETS = [
    ipaddress.ip_network("127.0.0.0/8"),
    ipaddress.ip_network("10.0.0.0/8"),
    ipaddress.ip_network("172.16.0.0/12"),
    ipaddress.ip_network("192.168.0.0/16"),
    ipaddress.ip_network("169.254.0.0/16"),
    ipaddress.ip_network("0.0.0.0/8"),
    ipaddress.ip_network("::1/128"),
    ipaddress.ip_network("fc00::/7"),
    ipaddress.ip_network("fe80::/10"),
]

_LOCAL_HOSTNAMES = ("localhost", "localhost.localdomain")

DENIED_PATTERNS = (
    "placeholder",
    "default-image",
    "no-image",
    "missing-image",
    "image-not-found",
    "unavailable",
    "dummy",
    "sample",
    "blank.jpg",
    "blank.png",
    "1x1.gif",
    "transparent.gif",
)

EXCLUDED_HOSTS = ("example.com", "test.com", "localhost.com")


def _is_private_host(hostname: str) -> bool:
    if hostname in _LOCAL_HOSTNAMES or hostname.endswith(".localhost"):
        return True
    try:
        address = ipaddress.ip_address(hostname)
    except ValueError:
        return False
    return any(address in network for network in _PRIVATE_NETS)


def validate_image_url(url: object) -> bool:
    """Return True when ``url`` looks like a real, publicly hosted image.

    Never raises; anything unexpected simply fails validation.
    """

    if not isinstance(url, str):
        return False
    candidate = url.strip()
    if not MIN_URL_LENGTH <= len(candidate) <= MAX_URL_LENGTH:
        return False

    try:
        parsed = urlparse(candidate)
        hostname = (parsed.hostname or "").lower()
    except ValueError:
        return False

    if parsed.scheme.lower() not in _ALLOWED_SCHEMES or not hostname:
        return False
    if _is_private_host(hostname):
        return False
    if hostname in EXCLUDED_HOSTS:
        return False

    lowered = candidate.lower()
    return not any(pattern in lowered for pattern in DENIED_PATTERNS)
