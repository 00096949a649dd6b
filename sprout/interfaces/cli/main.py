"""Entry point for the sprout CLI.

Usage:
    python -m sprout.interfaces.cli.main

Or via installed entry point:
    sprout <command>
"""

from sprout.interfaces.cli import app


def main() -> None:
    """Run the sprout CLI application."""
    app()


if __name__ == "__main__":
    main()
