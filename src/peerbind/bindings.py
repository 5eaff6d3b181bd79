"""
Binding configuration for a peer-to-peer node.

``Bindings`` collects the user's intent (interfaces, protocol families,
explicit addresses) and resolves it against the live host network stack into
the concrete addresses the socket layer should try to bind. IPv4 addresses
always come before IPv6 addresses, since some host IPv6 stacks are unreliable.
"""
from ipaddress import IPv4Address, IPv6Address, ip_address
from typing import Any, List, Optional, Tuple, Union

import structlog
from pydantic import ValidationError

from .config import BindingsConfig
from .discovery.network import HostInterface, get_host_interfaces
from .exceptions import InvalidArgumentError
from .models.common import BasePydanticModel, HintScope, IPAddress, OutsideEndpoint, Protocol

logger = structlog.get_logger(__name__)

AddressLike = Union[IPAddress, str]


def _coerce_address(value: Any) -> IPAddress:
    if value is None:
        raise InvalidArgumentError("Cannot add None")
    if not isinstance(value, (str, IPv4Address, IPv6Address)):
        raise InvalidArgumentError(f"Expected an IP address or its text form, got {type(value).__name__}")
    try:
        return ip_address(value)
    except ValueError as e:
        raise InvalidArgumentError(f"Not an IP address: {value!r}") from e


def _coerce_protocol(value: Any) -> Protocol:
    if value is None:
        raise InvalidArgumentError("Cannot add None")
    try:
        return Protocol(value)
    except ValueError as e:
        raise InvalidArgumentError(f"Unknown protocol: {value!r}") from e


def interface_selected(name: str, interface_scope: HintScope[str]) -> bool:
    """Whether an interface called ``name`` takes part in discovery."""
    return name in interface_scope


def address_accepted(address: IPAddress, protocol_scope: HintScope[Protocol]) -> bool:
    """Whether ``address`` passes the protocol hints.

    Rejection is an expected outcome and is never logged or reported.
    """
    return Protocol.of(address) in protocol_scope


class BindingSnapshot(BasePydanticModel):
    """Immutable result of configuration and discovery, handed to the socket layer."""
    addresses: Tuple[IPAddress, ...] = ()
    broadcast_addresses: Tuple[IPAddress, ...] = ()
    listen_broadcast: bool = True
    outside: Optional[OutsideEndpoint] = None


class Bindings:
    """
    Address, interface and protocol hints for the listening sockets of a node,
    plus the externally visible endpoint it advertises to peers.

    Not thread safe: build and resolve it during startup, then hand a
    ``snapshot()`` to the networking code.
    """

    def __init__(
        self,
        listen_broadcast: bool = True,
        *,
        address: Optional[AddressLike] = None,
        protocol: Optional[Union[Protocol, str]] = None,
        interface: Optional[str] = None,
        outside_address: Optional[AddressLike] = None,
        outside_tcp_port: int = 0,
        outside_udp_port: int = 0,
    ):
        self._listen_addresses4: List[IPAddress] = []
        self._listen_addresses6: List[IPAddress] = []
        self._broadcast_addresses: List[IPAddress] = []
        self._interface_scope: HintScope[str] = HintScope.all()
        self._protocol_scope: HintScope[Protocol] = HintScope.all()
        self._listen_broadcast = listen_broadcast
        self._outside: Optional[OutsideEndpoint] = None

        if address is not None:
            self.add_address(address)
        if interface is not None:
            self.add_interface(interface)
        if protocol is not None:
            self.add_protocol(protocol)
        if outside_address is not None:
            self.set_outside_address(outside_address, outside_tcp_port, outside_udp_port)
        elif outside_tcp_port or outside_udp_port:
            raise InvalidArgumentError("Outside ports require an outside address")

    @classmethod
    def from_config(cls, bindings_config: BindingsConfig) -> "Bindings":
        """Build bindings from configuration. Discovery is left to the caller."""
        bindings = cls(listen_broadcast=bindings_config.listen_broadcast)
        for name in bindings_config.interfaces:
            bindings.add_interface(name)
        for protocol in bindings_config.protocols:
            bindings.add_protocol(protocol)
        for address in bindings_config.addresses:
            bindings.add_address(address)
        if bindings_config.outside_address is not None:
            bindings.set_outside_address(
                bindings_config.outside_address,
                bindings_config.outside_tcp_port,
                bindings_config.outside_udp_port,
            )
        return bindings

    # Addresses

    def add_address(self, address: AddressLike) -> None:
        address = _coerce_address(address)
        if isinstance(address, IPv4Address):
            self._listen_addresses4.append(address)
        else:
            self._listen_addresses6.append(address)

    def add_broadcast_address(self, broadcast_address: AddressLike) -> None:
        self._broadcast_addresses.append(_coerce_address(broadcast_address))

    def get_addresses(self) -> List[IPAddress]:
        """Addresses to bind, all IPv4 entries first, then IPv6."""
        return self._listen_addresses4 + self._listen_addresses6

    def get_broadcast_addresses(self) -> List[IPAddress]:
        """Broadcast addresses; only meaningful when ``is_listen_broadcast()``."""
        return list(self._broadcast_addresses)

    def is_listen_broadcast(self) -> bool:
        return self._listen_broadcast

    # Interface and protocol hints

    @property
    def interface_scope(self) -> HintScope[str]:
        return self._interface_scope

    @property
    def protocol_scope(self) -> HintScope[Protocol]:
        return self._protocol_scope

    def add_interface(self, interface_hint: str) -> None:
        if interface_hint is None:
            raise InvalidArgumentError("Cannot add None")
        if not isinstance(interface_hint, str):
            raise InvalidArgumentError(f"Interface name must be a string, got {type(interface_hint).__name__}")
        self._interface_scope = self._interface_scope.with_member(interface_hint)

    def get_interfaces(self) -> List[str]:
        return list(self._interface_scope.members)

    def add_protocol(self, protocol: Union[Protocol, str]) -> None:
        self._protocol_scope = self._protocol_scope.with_member(_coerce_protocol(protocol))

    def get_protocols(self) -> List[Protocol]:
        return list(self._protocol_scope.members)

    def set_all_interfaces(self) -> None:
        self._interface_scope = HintScope.all()

    def use_all_interfaces(self) -> bool:
        return self._interface_scope.is_all

    def set_all_protocols(self) -> None:
        self._protocol_scope = HintScope.all()

    def use_all_protocols(self) -> bool:
        return self._protocol_scope.is_all

    def use_ipv4(self) -> bool:
        return Protocol.IPV4 in self._protocol_scope

    def use_ipv6(self) -> bool:
        return Protocol.IPV6 in self._protocol_scope

    # Discovery

    def _discover_network(self, interface: HostInterface) -> str:
        """Add the accepted addresses and broadcast addresses of one interface.

        A broadcast address is registered once even when several included
        interfaces (or repeated discovery runs) report it, instead of being
        appended every time. Otherwise a protocol filter that rejects an IPv4
        address would re-add its broadcast address on each call.
        """
        accepted = []
        for iface_address in interface.addresses:
            address = iface_address.address
            if address in self.get_addresses():
                continue
            if address_accepted(address, self._protocol_scope):
                accepted.append(address)
                self.add_address(address)
            broadcast = iface_address.broadcast
            if broadcast is not None and broadcast not in self._broadcast_addresses:
                self.add_broadcast_address(broadcast)
        return "(" + ",".join(str(a) for a in accepted) + ")"

    def discover_local_interfaces(self) -> str:
        """
        Resolve the hints against the host's interfaces.

        Matching addresses and broadcast addresses are added to this object.
        Returns a status report such as ``"Status: +eth0(10.0.0.5), -lo"``.

        Raises:
            EnumerationError: If the host interfaces cannot be queried. Nothing
                is added in that case.
        """
        interfaces = get_host_interfaces()
        tokens = []
        for interface in interfaces:
            if interface_selected(interface.name, self._interface_scope):
                logger.debug("Interface included", interface=interface.name)
                tokens.append(f"+{interface.name}{self._discover_network(interface)}")
            else:
                logger.debug("Interface excluded", interface=interface.name)
                tokens.append(f"-{interface.name}")
        status = "Status: " + ", ".join(tokens)
        logger.info(
            "Discovered local interfaces",
            status=status,
            addresses=[str(a) for a in self.get_addresses()],
            broadcast_addresses=[str(a) for a in self._broadcast_addresses],
        )
        return status

    # Outside endpoint

    def set_outside_address(self, outside_address: AddressLike, outside_tcp_port: int, outside_udp_port: int) -> None:
        if outside_address is None:
            raise InvalidArgumentError("address cannot be None")
        for port in (outside_tcp_port, outside_udp_port):
            if isinstance(port, bool) or not isinstance(port, int):
                raise InvalidArgumentError("ports must be integers")
        if outside_tcp_port <= 0 or outside_udp_port <= 0:
            raise InvalidArgumentError("port needs to be > 0")
        try:
            self._outside = OutsideEndpoint(
                address=_coerce_address(outside_address),
                tcp_port=outside_tcp_port,
                udp_port=outside_udp_port,
            )
        except ValidationError as e:
            raise InvalidArgumentError(f"Invalid outside endpoint: {e}") from e

    def get_outside_address(self) -> Optional[IPAddress]:
        return self._outside.address if self._outside else None

    def get_outside_tcp_port(self) -> int:
        return self._outside.tcp_port if self._outside else 0

    def get_outside_udp_port(self) -> int:
        return self._outside.udp_port if self._outside else 0

    def get_outside_endpoint(self) -> Optional[OutsideEndpoint]:
        return self._outside

    def snapshot(self) -> BindingSnapshot:
        return BindingSnapshot(
            addresses=tuple(self.get_addresses()),
            broadcast_addresses=tuple(self._broadcast_addresses),
            listen_broadcast=self._listen_broadcast,
            outside=self._outside,
        )

    def __repr__(self) -> str:
        return (
            f"Bindings(addresses={[str(a) for a in self.get_addresses()]}, "
            f"interfaces={self._interface_scope!r}, protocols={self._protocol_scope!r}, "
            f"listen_broadcast={self._listen_broadcast})"
        )
