"""CLI commands: peers list/check/diff over the configured peer set."""

from __future__ import annotations

import click

from peerbook.address import PeerAddress, address_role_str
from peerbook.cli import load_cli_config
from peerbook.config import build_registry
from peerbook.errors import AddressParseError


@click.group(name="peers")
def peers_group() -> None:
    """Inspect known peer addresses."""


@peers_group.command(name="list")
@click.option("--manual", is_flag=True, help="Only operator-configured peers.")
@click.pass_context
def list_peers(ctx: click.Context, manual: bool) -> None:
    """Show seed peers from config."""
    registry = build_registry(load_cli_config(ctx))

    if manual:
        addresses = registry.get_manual()
    else:
        addresses = registry.get_all()

    click.echo(f"Known peers: {len(addresses)}")
    for addr in sorted(addresses):
        click.echo(f"  {addr}")


@peers_group.command()
@click.argument("address")
def check(address: str) -> None:
    """Parse ADDRESS and show its canonical form.

    ADDRESS: host:port or host:port:role, e.g. 10.0.0.1:9876:trx
    """
    try:
        parsed = PeerAddress.from_str(address)
    except AddressParseError as exc:
        click.echo(click.style("Invalid: ", fg="red") + exc.error.format())
        raise SystemExit(1) from exc

    click.echo(click.style("Valid: ", fg="green") + parsed.to_str())
    click.echo(f"  host: {parsed.host}")
    click.echo(f"  port: {parsed.port}")
    click.echo(f"  role: {parsed.role.value} ({address_role_str(parsed.role)})")


@peers_group.command()
@click.argument("known", nargs=-1)
@click.option("--manual", is_flag=True, help="Only consider manual peers.")
@click.pass_context
def diff(ctx: click.Context, known: tuple[str, ...], manual: bool) -> None:
    """Show configured peers missing from KNOWN."""
    registry = build_registry(load_cli_config(ctx))
    missing = registry.get_diff(set(known), manual_only=manual)

    if not missing:
        click.echo("Nothing to advertise.")
        return
    click.echo(f"Missing from remote: {len(missing)}")
    for addr in sorted(missing):
        click.echo(f"  {addr}")
