"""peerbook: thread-safe registry of known peer network endpoints."""

from __future__ import annotations

from peerbook.address import AddressRole, PeerAddress
from peerbook.errors import AddressParseError
from peerbook.registry import AddressRegistry

__version__ = "0.1.0"

__all__ = [
    "AddressParseError",
    "AddressRegistry",
    "AddressRole",
    "PeerAddress",
    "__version__",
]
