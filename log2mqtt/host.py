"""
Host address discovery for the ``hostname`` identity tag.
"""

import ipaddress
import socket

LOOPBACK_ADDRESS = "127.0.0.1"


class HostDiscoveryError(OSError):
    """Raised when no usable IPv4 address is found."""
    pass


def discover_hostname() -> str:
    """
    Return the first non-loopback IPv4 address of this host.

    Raises:
        HostDiscoveryError: If the host has no such address
    """
    try:
        infos = socket.getaddrinfo(socket.gethostname(), None, socket.AF_INET)
    except OSError as e:
        raise HostDiscoveryError(f"Address lookup failed: {e}") from e

    for _family, _type, _proto, _canonname, sockaddr in infos:
        address = ipaddress.ip_address(sockaddr[0])
        if not address.is_loopback:
            return str(address)

    raise HostDiscoveryError("No IP address found")
