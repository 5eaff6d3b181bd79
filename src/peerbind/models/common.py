from enum import Enum
from ipaddress import IPv4Address, IPv6Address
from typing import Generic, Iterable, Tuple, TypeVar, Union

from pydantic import BaseModel, Field

IPAddress = Union[IPv4Address, IPv6Address]

T = TypeVar("T")


class BasePydanticModel(BaseModel):
    model_config = {
        "extra": "forbid",
        "frozen": True,
    }

class Protocol(str, Enum):
    IPV4 = "IPv4"
    IPV6 = "IPv6"

    @classmethod
    def _missing_(cls, value):
        # Accept "ipv4", "IPV6", ...
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.lower():
                    return member
        return None

    @classmethod
    def of(cls, address: IPAddress) -> "Protocol":
        return cls.IPV4 if address.version == 4 else cls.IPV6

class ScopeKind(str, Enum):
    ALL = "all"
    SUBSET = "subset"


class HintScope(Generic[T]):
    """Either every candidate (ALL) or an ordered, non-empty subset of them.

    Replaces the "empty list means everything" convention so that a scope is
    always one of two explicit states.
    """

    __slots__ = ("_kind", "_members")

    def __init__(self, kind: ScopeKind, members: Tuple[T, ...] = ()):
        if kind is ScopeKind.ALL and members:
            raise ValueError("An ALL scope has no members")
        if kind is ScopeKind.SUBSET and not members:
            raise ValueError("A SUBSET scope needs at least one member")
        self._kind = kind
        self._members = tuple(members)

    @classmethod
    def all(cls) -> "HintScope[T]":
        return cls(ScopeKind.ALL)

    @classmethod
    def subset(cls, members: Iterable[T]) -> "HintScope[T]":
        return cls(ScopeKind.SUBSET, tuple(members))

    @property
    def kind(self) -> ScopeKind:
        return self._kind

    @property
    def members(self) -> Tuple[T, ...]:
        return self._members

    @property
    def is_all(self) -> bool:
        return self._kind is ScopeKind.ALL

    def with_member(self, member: T) -> "HintScope[T]":
        """Return a subset scope with ``member`` appended."""
        return HintScope.subset(self._members + (member,))

    def __contains__(self, item: object) -> bool:
        return self.is_all or item in self._members

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HintScope):
            return NotImplemented
        return self._kind is other._kind and self._members == other._members

    def __hash__(self) -> int:
        return hash((self._kind, self._members))

    def __repr__(self) -> str:
        if self.is_all:
            return "HintScope.all()"
        return f"HintScope.subset({list(self._members)!r})"

class OutsideEndpoint(BasePydanticModel):
    """Address and ports by which the node is reachable from outside its network."""
    address: IPAddress
    tcp_port: int = Field(..., gt=0, le=65535, strict=True)
    udp_port: int = Field(..., gt=0, le=65535, strict=True)
