"""peerbook CLI: Click command groups and sub-commands.

- ``peers``: ``peers list``, ``peers check``, ``peers diff``
- ``config``: ``config show``, ``config add-seed``, ``config remove-seed``
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
import structlog

from peerbook import __version__
from peerbook.config import Config, load_config


def configure_logging(level: str) -> None:
    """Configure structlog once at CLI entry; log lines go to stderr."""
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=lambda *args: structlog.PrintLogger(sys.stderr),
    )


@click.group()
@click.version_option(version=__version__, prog_name="peerbook")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="PEERBOOK_CONFIG",
    default=None,
    help="Path to config.toml (default: ~/.peerbook/config.toml).",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error", "critical"]),
    default=None,
    help="Log level (default: node.log_level from config).",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, log_level: str | None) -> None:
    """peerbook: registry of known peer endpoints."""
    configure_logging(log_level or "warning")
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["log_level"] = log_level


def load_cli_config(ctx: click.Context) -> Config:
    """Load config for a sub-command and apply its log level unless overridden."""
    config = load_config(ctx.obj["config_path"])
    if ctx.obj["log_level"] is None:
        configure_logging(config.node.log_level)
    return config


# Register sub-command modules
from peerbook.cli.config import config_group  # noqa: E402
from peerbook.cli.peers import peers_group  # noqa: E402

cli.add_command(peers_group)
cli.add_command(config_group)
