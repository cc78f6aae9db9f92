"""Configuration management for peerbook.

Settings live in ``~/.peerbook/config.toml``; any key can be overridden by
a ``PEERBOOK_{SECTION}_{KEY}`` environment variable.  Seed peers are the
operator-configured (manual) entries the registry starts with.

Example config::

    [node]
    log_level = "debug"

    [peers]
    seed_peers = ["10.0.0.1:9876", "seed.example.org:9876:trx"]
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import TypeVar

import structlog

from peerbook.errors import ERRORS, AddressParseError
from peerbook.registry import AddressRegistry

logger = structlog.get_logger()

T = TypeVar("T")

DEFAULT_DATA_DIR = Path.home() / ".peerbook"
DEFAULT_CONFIG_PATH = DEFAULT_DATA_DIR / "config.toml"

LOG_LEVELS = frozenset({"debug", "info", "warning", "error", "critical"})


@dataclass(frozen=True)
class NodeConfig:
    """Local node settings."""

    data_dir: Path = DEFAULT_DATA_DIR
    log_level: str = "info"


@dataclass(frozen=True)
class PeersConfig:
    """Operator-configured seed peers."""

    seed_peers: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Config:
    """Root configuration container."""

    node: NodeConfig = field(default_factory=NodeConfig)
    peers: PeersConfig = field(default_factory=PeersConfig)


_SECTIONS: dict[str, type] = {"node": NodeConfig, "peers": PeersConfig}


def _from_env(value: str, default: object) -> object:
    """Interpret an environment string using the field's default as type hint."""
    if isinstance(default, list):
        # Comma-separated
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


def _normalize(key: str, value: object, default: object) -> object | None:
    """Convert *value* to the field's type; ``None`` means keep the default."""
    if isinstance(default, Path):
        return Path(str(value))
    if isinstance(default, list):
        if not isinstance(value, list):
            logger.warning("config_invalid_value", code=ERRORS["E004"].code, key=key)
            return None
        return [str(item) for item in value]
    if key == "log_level":
        level = str(value).lower()
        if level not in LOG_LEVELS:
            logger.warning(
                "config_invalid_value",
                code=ERRORS["E004"].code,
                key=key,
                value=value,
                allowed=sorted(LOG_LEVELS),
            )
            return None
        return level
    return str(value)


def _build_section(cls: type[T], table: dict[str, object], name: str) -> T:
    defaults = cls()
    kwargs: dict[str, object] = {}
    for f in fields(cls):  # type: ignore[arg-type]
        default = getattr(defaults, f.name)
        value = table.get(f.name)
        env_val = os.environ.get(f"PEERBOOK_{name.upper()}_{f.name.upper()}")
        if env_val is not None:
            value = _from_env(env_val, default)
        if value is None:
            continue
        normalized = _normalize(f.name, value, default)
        if normalized is not None:
            kwargs[f.name] = normalized
    return cls(**kwargs)


def load_config(config_path: Path | None = None) -> Config:
    """Load configuration with environment variable overrides.

    Priority: env vars > config.toml > defaults.

    Args:
        config_path: Path to config file. Defaults to ~/.peerbook/config.toml.

    Returns:
        Populated Config instance.
    """
    path = config_path or DEFAULT_CONFIG_PATH
    raw: dict[str, object] = {}
    if path.exists():
        with open(path, "rb") as f:
            raw = tomllib.load(f)
        logger.info("config_loaded", path=str(path))
    else:
        logger.info("config_default", path=str(path), reason="file not found")

    sections = {
        name: _build_section(cls, raw.get(name, {}), name)  # type: ignore[arg-type]
        for name, cls in _SECTIONS.items()
    }
    return Config(**sections)


def _toml_str(value: str) -> str:
    """Quote *value* as a TOML basic string."""
    out: list[str] = []
    for ch in value:
        if ch in ("\\", '"'):
            out.append("\\" + ch)
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


def _toml_value(value: object) -> str:
    if isinstance(value, list):
        return "[" + ", ".join(_toml_str(str(item)) for item in value) + "]"
    return _toml_str(str(value))


def save_config(config: Config, config_path: Path | None = None) -> None:
    """Write the keys of *config* that differ from the defaults.

    Args:
        config: Config instance to persist.
        config_path: Path to config file. Defaults to ~/.peerbook/config.toml.
    """
    path = config_path or DEFAULT_CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)

    defaults = Config()
    lines: list[str] = ["# peerbook configuration", ""]
    for name in _SECTIONS:
        current = getattr(config, name)
        baseline = getattr(defaults, name)
        changed = [
            f"{f.name} = {_toml_value(getattr(current, f.name))}"
            for f in fields(current)
            if getattr(current, f.name) != getattr(baseline, f.name)
        ]
        if changed:
            lines += [f"[{name}]", *changed, ""]

    path.write_text("\n".join(lines), encoding="utf-8")
    logger.info("config_saved", path=str(path))


def build_registry(config: Config) -> AddressRegistry:
    """Create a registry holding the configured seed peers as manual entries.

    Malformed seeds are logged and skipped; the rest are still loaded.
    """
    registry = AddressRegistry()
    for seed in config.peers.seed_peers:
        try:
            registry.add_from_string(seed, is_manual=True)
        except AddressParseError as exc:
            logger.warning("seed_rejected", address=seed, code=exc.error.code)
    logger.info("registry_seeded", count=registry.count())
    return registry
