import ipaddress
import logging
import socket

import psutil

from app.errors import CollaboratorError
from app.models.host import HostIdentity

logger = logging.getLogger(__name__)

# Returned instead of an address when no external IPv4 interface exists
ADDRESS_SENTINEL = "N/A"


def local_address() -> str:
    """
    Return the first IPv4 address bound to a non-loopback interface.

    Interfaces are visited in the order psutil reports them. If the host only
    has loopback (or no IPv4 at all), ADDRESS_SENTINEL is returned instead.
    """
    for interface, addresses in psutil.net_if_addrs().items():
        for addr in addresses:
            if addr.family != socket.AF_INET:
                continue
            if ipaddress.ip_address(addr.address).is_loopback:
                continue
            logger.debug("Using %s from interface %s", addr.address, interface)
            return addr.address

    return ADDRESS_SENTINEL


def local_hostname() -> str:
    return socket.gethostname()


def get_host_identity() -> HostIdentity:
    """
    Collect address and hostname of the serving host as a HostIdentity.

    OS-level lookup failures are reported as CollaboratorError so that the
    API layer can treat them like any other collaborator failure.
    """
    try:
        return HostIdentity(address=local_address(), hostname=local_hostname())
    except OSError as exc:
        raise CollaboratorError(f"host identity lookup failed: {exc}") from exc
