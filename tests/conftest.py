"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from peerbook.registry import AddressRegistry


@pytest.fixture
def registry() -> AddressRegistry:
    """An empty registry."""
    return AddressRegistry()


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Path to a not-yet-written config.toml in a temp directory."""
    return tmp_path / "config.toml"
