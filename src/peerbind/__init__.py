"""peerbind - listening-address configuration for peer-to-peer nodes.

Resolves interface and protocol hints against the host's network interfaces
into concrete, IPv4-first bind addresses, and tracks the node's outside
(NAT-mapped) endpoint.
"""

__version__ = "0.1.0"

from .bindings import BindingSnapshot, Bindings, address_accepted, interface_selected
from .config import BindingsConfig, Config
from .exceptions import BindingsError, EnumerationError, InvalidArgumentError
from .models.common import HintScope, OutsideEndpoint, Protocol

__all__ = [
    "BindingSnapshot",
    "Bindings",
    "BindingsConfig",
    "BindingsError",
    "Config",
    "EnumerationError",
    "HintScope",
    "InvalidArgumentError",
    "OutsideEndpoint",
    "Protocol",
    "address_accepted",
    "interface_selected",
]
