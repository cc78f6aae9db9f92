"""Tests for the peerbook CLI."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner, Result

from peerbook.cli import cli
from peerbook.config import load_config


def _invoke(config_file: Path, *args: str) -> Result:
    runner = CliRunner()
    return runner.invoke(cli, ["--config", str(config_file), *args])


def _write_seeds(config_file: Path, *seeds: str) -> None:
    items = ", ".join(f'"{s}"' for s in seeds)
    config_file.write_text(f"[peers]\nseed_peers = [{items}]\n")


class TestPeersCheck:
    def test_valid(self, config_file: Path) -> None:
        result = _invoke(config_file, "peers", "check", "[::1]:9876:BLK")
        assert result.exit_code == 0
        assert "[::1]:9876:blk" in result.output
        assert "blocks only" in result.output

    def test_invalid(self, config_file: Path) -> None:
        result = _invoke(config_file, "peers", "check", "10.0.0.1:70000")
        assert result.exit_code == 1
        assert "PEERBOOK_E002" in result.output


class TestPeersList:
    def test_lists_seeds(self, config_file: Path) -> None:
        _write_seeds(config_file, "10.0.0.2:9876", "10.0.0.1:9876:trx")
        result = _invoke(config_file, "peers", "list")
        assert result.exit_code == 0
        assert "Known peers: 2" in result.output
        assert "10.0.0.1:9876:trx" in result.output

    def test_manual(self, config_file: Path) -> None:
        _write_seeds(config_file, "10.0.0.1:9876")
        result = _invoke(config_file, "peers", "list", "--manual")
        assert "Known peers: 1" in result.output

    def test_rejects_removed_active_option(self, config_file: Path) -> None:
        result = _invoke(config_file, "peers", "list", "--active", "60")
        assert result.exit_code == 2


class TestPeersDiff:
    def test_missing(self, config_file: Path) -> None:
        _write_seeds(config_file, "10.0.0.1:9876", "10.0.0.2:9876")
        result = _invoke(config_file, "peers", "diff", "10.0.0.1:9876")
        assert result.exit_code == 0
        assert "Missing from remote: 1" in result.output
        assert "10.0.0.2:9876" in result.output

    def test_nothing_missing(self, config_file: Path) -> None:
        _write_seeds(config_file, "10.0.0.1:9876")
        result = _invoke(config_file, "peers", "diff", "--manual", "10.0.0.1:9876")
        assert "Nothing to advertise." in result.output


class TestConfigCommands:
    def test_show(self, config_file: Path) -> None:
        result = _invoke(config_file, "config", "show")
        assert result.exit_code == 0
        assert "[peers]" in result.output
        assert "seed_peers = []" in result.output

    def test_add_seed_canonicalizes(self, config_file: Path) -> None:
        result = _invoke(config_file, "config", "add-seed", " 10.0.0.1:9876:TRX ")
        assert result.exit_code == 0
        assert load_config(config_file).peers.seed_peers == ["10.0.0.1:9876:trx"]

    def test_add_seed_twice(self, config_file: Path) -> None:
        _invoke(config_file, "config", "add-seed", "10.0.0.1:9876")
        result = _invoke(config_file, "config", "add-seed", "10.0.0.1:9876")
        assert "Already in seed list." in result.output
        assert load_config(config_file).peers.seed_peers == ["10.0.0.1:9876"]

    def test_add_seed_same_key_other_role(self, config_file: Path) -> None:
        _invoke(config_file, "config", "add-seed", "10.0.0.1:9876")
        result = _invoke(config_file, "config", "add-seed", "10.0.0.1:9876:trx")
        assert "Already in seed list." in result.output
        assert load_config(config_file).peers.seed_peers == ["10.0.0.1:9876"]

    @pytest.mark.parametrize("seed", ['a"b:9876', "a\\b:9876"])
    def test_add_seed_special_host_then_list(
        self, config_file: Path, seed: str
    ) -> None:
        added = _invoke(config_file, "config", "add-seed", seed)
        assert added.exit_code == 0

        result = _invoke(config_file, "peers", "list")
        assert result.exit_code == 0
        assert "Known peers: 1" in result.output
        assert f"  {seed}\n" in result.output

    def test_add_seed_invalid(self, config_file: Path) -> None:
        result = _invoke(config_file, "config", "add-seed", "nope")
        assert result.exit_code == 1
        assert not config_file.exists()

    def test_remove_seed_by_key(self, config_file: Path) -> None:
        _write_seeds(config_file, "10.0.0.1:9876:trx", "10.0.0.2:9876")
        result = _invoke(config_file, "config", "remove-seed", "10.0.0.1:9876")
        assert result.exit_code == 0
        assert load_config(config_file).peers.seed_peers == ["10.0.0.2:9876"]

    def test_remove_seed_missing(self, config_file: Path) -> None:
        _write_seeds(config_file, "10.0.0.2:9876")
        result = _invoke(config_file, "config", "remove-seed", "10.0.0.1:9876")
        assert "Not found in seed list." in result.output
