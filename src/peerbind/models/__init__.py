"""
Pydantic models and value types for peerbind.
"""
from .common import (
    BasePydanticModel,
    HintScope,
    IPAddress,
    OutsideEndpoint,
    Protocol,
    ScopeKind,
)

__all__ = [
    "BasePydanticModel",
    "HintScope",
    "IPAddress",
    "OutsideEndpoint",
    "Protocol",
    "ScopeKind",
]
