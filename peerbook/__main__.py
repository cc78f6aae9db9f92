"""peerbook CLI entry point.

Delegates to ``peerbook.cli`` which houses all Click commands, so that
``python -m peerbook`` and the ``peerbook`` console script resolve here.
"""

from __future__ import annotations

from peerbook.cli import cli


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
