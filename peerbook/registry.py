"""Address registry: every peer endpoint the node knows about.

The connection manager consults this registry to decide which peers to
dial, which to advertise and which to prune.  It tracks whether each
endpoint was configured by the operator (``manual``) or learned from peer
exchange, and when it was last seen active.

All operations serialize on one :class:`threading.Lock`, reads included.
Peer counts are small, so lookups are linear scans by ``(host, port)``.
Records are immutable :class:`PeerAddress` values; callers only ever hold
copies.

Usage::

    registry = AddressRegistry()
    registry.add_from_string("10.0.0.1:9876", is_manual=True)
    registry.touch("10.0.0.2:9876:trx")
    to_advertise = registry.get_diff(remote_known, manual_only=False)
"""

from __future__ import annotations

import threading
import time
from collections.abc import Iterable
from dataclasses import replace as dc_replace
from datetime import timedelta

import structlog

from peerbook.address import PeerAddress, address_role_str

logger = structlog.get_logger()


class AddressRegistry:
    """Thread-safe in-memory store of :class:`PeerAddress` records.

    At most one record exists per identity key.  Missing entries are never
    an error: removals and updates of unknown addresses are no-ops and
    :meth:`get` returns ``None``.  Malformed address strings raise
    :class:`~peerbook.errors.AddressParseError` before anything changes.
    """

    def __init__(self) -> None:
        self._addresses: list[PeerAddress] = []
        self._lock = threading.Lock()

    # ── Internal helpers (caller holds the lock) ───────────────────

    def _index_of(self, address: PeerAddress) -> int | None:
        for i, existing in enumerate(self._addresses):
            if existing == address:
                return i
        return None

    # ── Insert / upsert ────────────────────────────────────────────

    def add(self, address: PeerAddress) -> None:
        """Insert *address* unless its key is already present."""
        with self._lock:
            logger.debug(
                "address_add",
                host=address.host,
                port=address.port,
                role=address_role_str(address.role),
            )
            if self._index_of(address) is None:
                self._addresses.append(address)

    def add_or_update(self, address: PeerAddress) -> None:
        """Insert *address*, or refresh ``manual``/``receive`` on the existing entry.

        The stored ``role`` and ``last_active`` of an existing entry are
        left untouched.
        """
        with self._lock:
            logger.debug(
                "address_add_or_update",
                host=address.host,
                port=address.port,
                role=address_role_str(address.role),
            )
            idx = self._index_of(address)
            if idx is None:
                self._addresses.append(address)
            else:
                self._addresses[idx] = dc_replace(
                    self._addresses[idx],
                    manual=address.manual,
                    receive=address.receive,
                )

    def touch(self, address_str: str) -> None:
        """Record activity for *address_str* via :meth:`add_or_update`.

        Only a newly inserted entry carries the fresh ``last_active``;
        an existing entry keeps its stored timestamp.
        """
        self.add_or_update(PeerAddress.from_str(address_str).with_activity())

    def add_from_string(self, address_str: str, is_manual: bool) -> None:
        """Parse and :meth:`add`. An existing entry keeps its own ``manual`` flag."""
        self.add(PeerAddress.from_str(address_str, manual=is_manual))

    def add_active_from_string(self, address_str: str) -> None:
        """Parse as non-manual, stamp as active now, and :meth:`add`."""
        self.add(PeerAddress.from_str(address_str, manual=False).with_activity())

    def add_many_from_strings(
        self, address_strs: Iterable[str], is_manual: bool
    ) -> None:
        """Insert every address whose key is not already present.

        All strings are parsed before the registry changes, so one
        malformed entry rejects the whole batch.
        """
        parsed = [PeerAddress.from_str(s, manual=is_manual) for s in address_strs]
        with self._lock:
            for address in parsed:
                if self._index_of(address) is None:
                    self._addresses.append(address)

    # ── Remove ─────────────────────────────────────────────────────

    def remove(self, address: PeerAddress) -> None:
        """Delete the entry with *address*'s key, if any."""
        with self._lock:
            idx = self._index_of(address)
            if idx is not None:
                del self._addresses[idx]

    def remove_from_string(self, address_str: str) -> None:
        self.remove(PeerAddress.from_str(address_str))

    def remove_many_from_strings(self, address_strs: Iterable[str]) -> None:
        """Delete every listed address that is present; skip the rest."""
        parsed = [PeerAddress.from_str(s) for s in address_strs]
        with self._lock:
            for address in parsed:
                idx = self._index_of(address)
                if idx is not None:
                    del self._addresses[idx]
                    logger.debug(
                        "address_removed", host=address.host, port=address.port
                    )

    # ── Update ─────────────────────────────────────────────────────

    def update(self, address: PeerAddress) -> None:
        """Replace the entry with *address*'s key wholesale. Never inserts."""
        with self._lock:
            idx = self._index_of(address)
            if idx is not None:
                self._addresses[idx] = address

    # ── Queries ────────────────────────────────────────────────────

    def get_all(self) -> set[str]:
        """Snapshot of every entry in canonical string form."""
        with self._lock:
            return {a.to_str() for a in self._addresses}

    def get(self, address_str: str) -> PeerAddress | None:
        """Return the stored entry for *address_str*, or ``None`` if absent."""
        key = PeerAddress.from_str(address_str)
        with self._lock:
            idx = self._index_of(key)
            return None if idx is None else self._addresses[idx]

    def get_manual(self) -> set[str]:
        """Snapshot of operator-configured entries."""
        with self._lock:
            return {a.to_str() for a in self._addresses if a.manual}

    def get_diff(self, existing: Iterable[str], manual_only: bool = False) -> set[str]:
        """Known addresses that are not in *existing*.

        Args:
            existing: Canonical address strings the other side already has.
            manual_only: Restrict the result to manual entries.

        Returns:
            Set difference between a fresh snapshot and *existing*.
        """
        snapshot = self.get_manual() if manual_only else self.get_all()
        return snapshot - set(existing)

    def get_active_since(
        self, duration: float | timedelta, manual_only: bool = False
    ) -> set[str]:
        """Entries with ``last_active`` within *duration* of now.

        Args:
            duration: Window length in seconds, or a :class:`timedelta`.
            manual_only: Restrict the result to manual entries.

        Returns:
            Canonical strings of matching entries. Never-active entries
            are excluded.
        """
        seconds = (
            duration.total_seconds() if isinstance(duration, timedelta) else duration
        )
        with self._lock:
            cutoff = time.time() - seconds
            return {
                a.to_str()
                for a in self._addresses
                if (not manual_only or a.manual) and a.is_active_since(cutoff)
            }

    def contains(self, address_str: str) -> bool:
        """``True`` if an entry with *address_str*'s key exists."""
        key = PeerAddress.from_str(address_str)
        with self._lock:
            return self._index_of(key) is not None

    def count(self) -> int:
        """Number of entries."""
        with self._lock:
            return len(self._addresses)

    def __contains__(self, address_str: object) -> bool:
        return isinstance(address_str, str) and self.contains(address_str)

    def __len__(self) -> int:
        return self.count()
