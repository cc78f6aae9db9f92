"""Peer address entity and its ``host:port[:role]`` string form.

Two addresses are the same peer when ``host`` and ``port`` match; role,
flags and activity time ride along as data.  Instances are immutable, so
handing one to a caller never exposes registry state.

Usage::

    addr = PeerAddress.from_str("10.0.0.1:9876:trx", manual=True)
    addr.key          # ("10.0.0.1", 9876)
    str(addr)         # "10.0.0.1:9876:trx"
    stamped = addr.with_activity()
"""

from __future__ import annotations

import re
import time
from dataclasses import dataclass, field
from dataclasses import replace as dc_replace
from enum import StrEnum

from peerbook.errors import AddressParseError

# ── Grammar ─────────────────────────────────────────────────────────────

MAX_PORT = 65535

_ADDRESS_RE = re.compile(
    r"""
    ^(?:\[(?P<ipv6>[0-9A-Za-z:.%]+)\]   # bracketed IPv6 literal
       |(?P<host>[^:\[\]\s]+))          # hostname or IPv4
    :(?P<port>\d{1,5})
    (?::(?P<role>[A-Za-z]+))?$
    """,
    re.VERBOSE | re.ASCII,
)


class AddressRole(StrEnum):
    """Which traffic a connection to this endpoint carries."""

    BOTH = "both"
    TRX = "trx"
    BLK = "blk"


# BOTH is the absence of a suffix, never spelled out
_ROLE_SUFFIXES = frozenset({AddressRole.TRX.value, AddressRole.BLK.value})

_ROLE_LABELS: dict[AddressRole, str] = {
    AddressRole.BOTH: "blocks and transactions",
    AddressRole.TRX: "transactions only",
    AddressRole.BLK: "blocks only",
}


def address_role_str(role: AddressRole) -> str:
    """Human-readable label for *role*, used in log lines."""
    return _ROLE_LABELS[role]


@dataclass(frozen=True)
class PeerAddress:
    """A known peer endpoint.

    Only ``host`` and ``port`` take part in equality and hashing.
    """

    host: str
    port: int
    role: AddressRole = field(default=AddressRole.BOTH, compare=False)
    manual: bool = field(default=False, compare=False)
    receive: bool = field(default=False, compare=False)
    last_active: float | None = field(default=None, compare=False)

    @property
    def key(self) -> tuple[str, int]:
        """Identity key ``(host, port)``."""
        return self.host, self.port

    def to_str(self) -> str:
        """Canonical ``host:port[:role]`` form."""
        host = f"[{self.host}]" if ":" in self.host else self.host
        if self.role is AddressRole.BOTH:
            return f"{host}:{self.port}"
        return f"{host}:{self.port}:{self.role.value}"

    def __str__(self) -> str:
        return self.to_str()

    @classmethod
    def from_str(cls, address: str, manual: bool = False) -> PeerAddress:
        """Parse ``host:port[:role]``.

        Args:
            address: Address string; IPv6 hosts must be bracketed.
            manual: Value for the ``manual`` flag of the result.

        Returns:
            A new :class:`PeerAddress` with ``last_active`` unset.

        Raises:
            AddressParseError: If *address* does not match the grammar.
        """
        if not isinstance(address, str):
            raise AddressParseError(repr(address))
        match = _ADDRESS_RE.match(address.strip())
        if match is None:
            raise AddressParseError(address)

        port = int(match["port"])
        if not 0 < port <= MAX_PORT:
            raise AddressParseError(address, "E002")

        role = AddressRole.BOTH
        if match["role"] is not None:
            suffix = match["role"].lower()
            if suffix not in _ROLE_SUFFIXES:
                raise AddressParseError(address, "E003")
            role = AddressRole(suffix)

        host = match["ipv6"] if match["ipv6"] is not None else match["host"]
        return cls(host=host, port=port, role=role, manual=manual)

    def with_activity(self, now: float | None = None) -> PeerAddress:
        """Return a copy with ``last_active`` set to *now* (default: current time)."""
        return dc_replace(self, last_active=time.time() if now is None else now)

    def is_active_since(self, cutoff: float) -> bool:
        """``True`` if stamped at or after *cutoff*. Unstamped never qualifies."""
        return self.last_active is not None and self.last_active >= cutoff
