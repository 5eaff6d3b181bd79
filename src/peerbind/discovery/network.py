"""Host network interface enumeration for peerbind."""

from dataclasses import dataclass, field
from ipaddress import ip_address
from typing import List, Optional

import netifaces
import structlog

from ..exceptions import EnumerationError
from ..models.common import IPAddress

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class InterfaceAddress:
    """One address configured on an interface, with its broadcast address if any."""
    address: IPAddress
    broadcast: Optional[IPAddress] = None


@dataclass(frozen=True)
class HostInterface:
    """A network interface as reported by the host."""
    name: str
    addresses: List[InterfaceAddress] = field(default_factory=list)

    @property
    def broadcast_addresses(self) -> List[IPAddress]:
        return [a.broadcast for a in self.addresses if a.broadcast is not None]


def _parse_address(value: str, interface: str) -> IPAddress:
    # IPv6 zone ids (fe80::1%eth0) are kept
    try:
        return ip_address(value)
    except ValueError as e:
        raise EnumerationError(
            f"Interface {interface} reported an invalid address {value!r}", interface=interface
        ) from e


def get_network_interfaces() -> List[str]:
    """Get the names of all network interfaces, in host-reported order.

    Returns:
        List[str]: List of interface names.

    Raises:
        EnumerationError: If the host network stack cannot be queried.
    """
    try:
        return list(netifaces.interfaces())
    except (OSError, ValueError) as e:
        logger.error("Failed to enumerate network interfaces", error=str(e))
        raise EnumerationError(f"Failed to enumerate network interfaces: {e}") from e


def get_interface_addresses(interface: str) -> List[InterfaceAddress]:
    """Get all IPv4 and IPv6 addresses for a given interface.

    IPv4 entries come before IPv6 entries; within a family the host order is kept.

    Args:
        interface: Network interface name.

    Returns:
        List[InterfaceAddress]: Addresses configured on the interface.

    Raises:
        EnumerationError: If the interface cannot be queried.
    """
    try:
        addr_info = netifaces.ifaddresses(interface)
    except (ValueError, OSError) as e:
        logger.error("Failed to get addresses for interface", interface=interface, error=str(e))
        raise EnumerationError(
            f"Failed to get addresses for interface {interface}: {e}", interface=interface
        ) from e

    addresses = []
    for family in (netifaces.AF_INET, netifaces.AF_INET6):
        for entry in addr_info.get(family, []):
            if 'addr' not in entry:
                continue
            broadcast = entry.get('broadcast')
            addresses.append(InterfaceAddress(
                address=_parse_address(entry['addr'], interface),
                broadcast=_parse_address(broadcast, interface) if broadcast else None,
            ))
    return addresses


def get_host_interfaces() -> List[HostInterface]:
    """Query the host for every interface and its addresses.

    The query is synchronous and has no timeout. Any failure aborts the whole
    enumeration; no partial result is returned.

    Raises:
        EnumerationError: If the host network stack cannot be queried.
    """
    interfaces = [
        HostInterface(name=name, addresses=get_interface_addresses(name))
        for name in get_network_interfaces()
    ]
    logger.debug("Enumerated host interfaces", interfaces=[i.name for i in interfaces])
    return interfaces
