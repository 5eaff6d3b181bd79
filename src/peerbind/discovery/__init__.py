"""
Host network discovery for peerbind.

Enumerates the live network interfaces of the host together with their
unicast and broadcast addresses.
"""

from .network import (
    HostInterface,
    InterfaceAddress,
    get_host_interfaces,
    get_interface_addresses,
    get_network_interfaces,
)

__all__ = [
    "HostInterface",
    "InterfaceAddress",
    "get_host_interfaces",
    "get_interface_addresses",
    "get_network_interfaces",
]
