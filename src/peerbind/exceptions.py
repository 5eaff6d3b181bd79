"""
Custom exceptions for peerbind.
"""
from typing import Optional

class BindingsError(Exception):
    """Base class for all binding configuration errors."""
    pass

class InvalidArgumentError(BindingsError, ValueError):
    """Raised by a mutator when given a missing value, an unparsable address
    or an out-of-range port. Signals a programming error, not a transient one."""
    pass

class EnumerationError(BindingsError):
    """Raised when the host network stack cannot be queried for its interfaces."""
    def __init__(self, message: str, interface: Optional[str] = None):
        super().__init__(message)
        self.interface = interface
