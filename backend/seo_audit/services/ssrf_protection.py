"""
SSRF Protection - Validate proxy targets to prevent server-side request forgery.
"""
import ipaddress
import socket
from urllib.parse import urlparse

from seo_audit.logger import logger


class SSRFBlocked(Exception):
    """Target URL points at an internal or otherwise forbidden address."""


class HostNotFound(Exception):
    """Target hostname does not resolve."""


class SSRFProtection:
    """Validates URLs before the proxy fetches them."""

    # Private/internal IP ranges to block
    BLOCKED_RANGES = [
        ipaddress.ip_network("10.0.0.0/8"),
        ipaddress.ip_network("172.16.0.0/12"),
        ipaddress.ip_network("192.168.0.0/16"),
        ipaddress.ip_network("127.0.0.0/8"),
        ipaddress.ip_network("169.254.0.0/16"),
        ipaddress.ip_network("0.0.0.0/8"),
        ipaddress.ip_network("::1/128"),
        ipaddress.ip_network("fc00::/7"),
        ipaddress.ip_network("fe80::/10"),
    ]

    # Blocked hostnames
    BLOCKED_HOSTS = {
        "localhost",
        "metadata.google.internal",
        "169.254.169.254",  # AWS/GCP metadata
    }

    @classmethod
    def resolve(cls, hostname: str) -> list[str]:
        """All addresses ``hostname`` resolves to (IP literals pass through)."""
        try:
            infos = socket.getaddrinfo(hostname, None)
        except socket.gaierror as e:
            raise HostNotFound(f"Could not resolve host: {hostname}") from e
        return sorted({info[4][0] for info in infos})

    @classmethod
    def is_blocked_ip(cls, address: str) -> bool:
        ip = ipaddress.ip_address(address.split("%", 1)[0])
        if getattr(ip, "ipv4_mapped", None):
            ip = ip.ipv4_mapped
        return any(ip in blocked for blocked in cls.BLOCKED_RANGES if ip.version == blocked.version)

    @classmethod
    def validate_url(cls, url: str) -> str:
        """
        Validate URL for SSRF vulnerabilities.

        Returns:
            The hostname that was checked

        Raises:
            SSRFBlocked: scheme, hostname or resolved address is not allowed
            HostNotFound: hostname does not resolve
        """
        parsed = urlparse(url)

        if parsed.scheme not in ("http", "https"):
            raise SSRFBlocked(f"Invalid scheme: {parsed.scheme}")

        hostname = parsed.hostname
        if not parsed.netloc or not hostname:
            raise SSRFBlocked("Empty hostname")

        if hostname.lower() in cls.BLOCKED_HOSTS:
            raise SSRFBlocked(f"Blocked hostname: {hostname}")

        for address in cls.resolve(hostname):
            if cls.is_blocked_ip(address):
                logger.warning(f"SSRF blocked: {hostname} resolves to {address}")
                raise SSRFBlocked(f"IP {address} is in a blocked range")

        return hostname
