"""User-facing interfaces for sprout (the Typer CLI)."""
