"""CLI commands: config show, config add-seed, config remove-seed."""

from __future__ import annotations

from dataclasses import asdict
from dataclasses import replace as dc_replace

import click

from peerbook.address import PeerAddress
from peerbook.cli import load_cli_config
from peerbook.config import save_config
from peerbook.errors import AddressParseError


@click.group("config")
def config_group() -> None:
    """Configuration management."""


@config_group.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Show current configuration."""
    cfg = asdict(load_cli_config(ctx))
    for section_name, section in cfg.items():
        click.echo(f"[{section_name}]")
        for key, value in section.items():
            click.echo(f"  {key} = {value}")
        click.echo()


@config_group.command("add-seed")
@click.argument("address")
@click.pass_context
def add_seed(ctx: click.Context, address: str) -> None:
    """Add a manual seed peer to config.

    ADDRESS: host:port or host:port:role
    """
    try:
        parsed = PeerAddress.from_str(address)
    except AddressParseError as exc:
        click.echo(click.style("Error: ", fg="red") + exc.error.format())
        raise SystemExit(1) from exc

    config = load_cli_config(ctx)
    current = list(config.peers.seed_peers)
    if any(_same_peer(seed, parsed) for seed in current):
        click.echo("Already in seed list.")
        return

    current.append(parsed.to_str())
    new_peers = dc_replace(config.peers, seed_peers=current)
    save_config(dc_replace(config, peers=new_peers), ctx.obj["config_path"])
    click.echo(click.style("Added: ", fg="green") + parsed.to_str())


@config_group.command("remove-seed")
@click.argument("address")
@click.pass_context
def remove_seed(ctx: click.Context, address: str) -> None:
    """Remove a manual seed peer from config.

    ADDRESS: The seed to remove; matched by host and port.
    """
    try:
        target = PeerAddress.from_str(address)
    except AddressParseError as exc:
        click.echo(click.style("Error: ", fg="red") + exc.error.format())
        raise SystemExit(1) from exc

    config = load_cli_config(ctx)
    current = list(config.peers.seed_peers)
    kept = [seed for seed in current if not _same_peer(seed, target)]

    if len(kept) == len(current):
        click.echo("Not found in seed list.")
        return

    new_peers = dc_replace(config.peers, seed_peers=kept)
    save_config(dc_replace(config, peers=new_peers), ctx.obj["config_path"])
    click.echo(click.style("Removed: ", fg="green") + target.to_str())


def _same_peer(seed: str, target: PeerAddress) -> bool:
    """Match *seed* to *target* by host and port; malformed seeds never match."""
    try:
        return PeerAddress.from_str(seed) == target
    except AddressParseError:
        return False
