"""Structured error codes and the address parse error."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class ErrorCategory(StrEnum):
    """Error category classification."""

    ADDRESS = "ADDRESS"
    CONFIG = "CONFIG"


@dataclass(frozen=True)
class PeerbookError:
    """Structured error with code, message, and resolution."""

    code: str
    category: ErrorCategory
    message: str
    resolution: str

    def to_dict(self) -> dict[str, object]:
        return {
            "error": {
                "code": self.code,
                "category": self.category.value,
                "message": self.message,
                "resolution": self.resolution,
            },
        }

    def format(self) -> str:
        return f"Error [{self.code}]: {self.message}\nResolution: {self.resolution}"


# ── Pre-defined error catalog ─────────────────────────────────────

ERRORS: dict[str, PeerbookError] = {
    "E001": PeerbookError(
        code="PEERBOOK_E001",
        category=ErrorCategory.ADDRESS,
        message="Malformed peer address",
        resolution="Use host:port or host:port:role, e.g. 10.0.0.1:9876:trx",
    ),
    "E002": PeerbookError(
        code="PEERBOOK_E002",
        category=ErrorCategory.ADDRESS,
        message="Port must be a number between 1 and 65535",
        resolution="Fix the port component of the address",
    ),
    "E003": PeerbookError(
        code="PEERBOOK_E003",
        category=ErrorCategory.ADDRESS,
        message="Unknown address role suffix",
        resolution="Use 'trx', 'blk', or omit the suffix",
    ),
    "E004": PeerbookError(
        code="PEERBOOK_E004",
        category=ErrorCategory.CONFIG,
        message="Invalid configuration value",
        resolution=(
            "Check config.toml for valid values. Run 'peerbook config show' to review."
        ),
    ),
}


def get_error(code: str) -> PeerbookError | None:
    """Look up an error by short code (e.g. 'E001')."""
    return ERRORS.get(code)


def format_error(code: str) -> str:
    """Format an error message by code."""
    err = ERRORS.get(code)
    if err is None:
        return f"Unknown error: {code}"
    return err.format()


class AddressParseError(ValueError):
    """Raised when a string does not match ``host:port[:role]``.

    Attributes:
        address: The offending input.
        error: Catalog entry describing the failure.
    """

    def __init__(self, address: str, code: str = "E001") -> None:
        self.address = address
        self.error = ERRORS[code]
        super().__init__(f"{self.error.message}: {address!r}")
