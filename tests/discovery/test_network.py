"""Tests for host network interface enumeration."""

from ipaddress import ip_address
from unittest.mock import patch

import netifaces
import pytest

from peerbind.discovery.network import (
    HostInterface,
    InterfaceAddress,
    get_host_interfaces,
    get_interface_addresses,
    get_network_interfaces,
)
from peerbind.exceptions import EnumerationError


def test_get_network_interfaces_keeps_host_order():
    """Interface names are returned as the host reports them, loopback included."""
    with patch('netifaces.interfaces', return_value=['lo', 'eth0', 'wlan0']):
        assert get_network_interfaces() == ['lo', 'eth0', 'wlan0']

def test_get_network_interfaces_failure_raises():
    """An unreachable network stack aborts enumeration."""
    with patch('netifaces.interfaces', side_effect=OSError("stack down")):
        with pytest.raises(EnumerationError):
            get_network_interfaces()

def test_get_interface_addresses():
    """IPv4 entries come first and carry their broadcast address."""
    mock_addr_info = {
        netifaces.AF_INET6: [{'addr': 'fe80::1234%eth0', 'netmask': 'ffff:ffff:ffff:ffff::/64'}],
        netifaces.AF_INET: [{'addr': '192.168.1.100', 'netmask': '255.255.255.0', 'broadcast': '192.168.1.255'}],
    }
    with patch('netifaces.ifaddresses', return_value=mock_addr_info):
        addresses = get_interface_addresses('eth0')

    assert addresses == [
        InterfaceAddress(address=ip_address('192.168.1.100'), broadcast=ip_address('192.168.1.255')),
        InterfaceAddress(address=ip_address('fe80::1234%eth0')),  # Zone id is kept
    ]

def test_get_interface_addresses_no_ips():
    """Test handling of interface with no IP addresses."""
    with patch('netifaces.ifaddresses', return_value={}):
        assert get_interface_addresses('eth0') == []

def test_get_interface_addresses_skips_entries_without_addr():
    with patch('netifaces.ifaddresses', return_value={netifaces.AF_INET: [{'netmask': '255.0.0.0'}]}):
        assert get_interface_addresses('eth0') == []

def test_get_interface_addresses_error_raises():
    """Errors from the host query are not swallowed."""
    with patch('netifaces.ifaddresses', side_effect=ValueError("You must specify a valid interface name.")):
        with pytest.raises(EnumerationError) as exc_info:
            get_interface_addresses('eth9')
    assert exc_info.value.interface == 'eth9'
    assert isinstance(exc_info.value.__cause__, ValueError)

def test_get_interface_addresses_invalid_address_raises():
    with patch('netifaces.ifaddresses', return_value={netifaces.AF_INET: [{'addr': 'not-an-ip'}]}):
        with pytest.raises(EnumerationError):
            get_interface_addresses('eth0')

def test_get_host_interfaces():
    """Each interface is paired with its addresses."""
    addr_info = {
        'eth0': {netifaces.AF_INET: [{'addr': '10.0.0.5', 'broadcast': '10.0.0.255'}]},
        'lo': {netifaces.AF_INET: [{'addr': '127.0.0.1'}]},
    }
    with patch('netifaces.interfaces', return_value=['eth0', 'lo']), \
         patch('netifaces.ifaddresses', side_effect=lambda name: addr_info[name]):
        interfaces = get_host_interfaces()

    assert [i.name for i in interfaces] == ['eth0', 'lo']
    assert interfaces[0].broadcast_addresses == [ip_address('10.0.0.255')]
    assert interfaces[1].broadcast_addresses == []

def test_get_host_interfaces_aborts_on_any_failure():
    """A failure on one interface discards the whole enumeration."""
    def ifaddresses(name):
        if name == 'wlan0':
            raise OSError("gone")
        return {netifaces.AF_INET: [{'addr': '10.0.0.5'}]}

    with patch('netifaces.interfaces', return_value=['eth0', 'wlan0']), \
         patch('netifaces.ifaddresses', side_effect=ifaddresses):
        with pytest.raises(EnumerationError) as exc_info:
            get_host_interfaces()
    assert exc_info.value.interface == 'wlan0'

def test_host_interface_defaults():
    iface = HostInterface(name='dummy0')
    assert iface.addresses == []
    assert iface.broadcast_addresses == []
