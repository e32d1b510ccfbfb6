"""Output formatting utilities for CLI commands."""

from collections.abc import Iterable, Sequence

import click


def success(message: str) -> None:
    """Print a success message in green."""
    click.secho(f"✓ {message}", fg="green")


def error(message: str) -> None:
    """Print an error message in red."""
    click.secho(f"✗ {message}", fg="red", err=True)


def warning(message: str) -> None:
    """Print a warning message in yellow."""
    click.secho(f"⚠ {message}", fg="yellow")


def info(message: str) -> None:
    """Print an info message in blue."""
    click.secho(f"ℹ {message}", fg="blue")


def table(headers: Sequence[str], rows: Iterable[Sequence[object]]) -> None:
    """Print rows as left-aligned columns."""
    text_rows = [[str(cell) for cell in row] for row in rows]
    widths = [len(h) for h in headers]
    for row in text_rows:
        widths = [max(w, len(cell)) for w, cell in zip(widths, row, strict=False)]

    click.secho("  ".join(h.ljust(w) for h, w in zip(headers, widths, strict=False)), bold=True)
    for row in text_rows:
        click.echo("  ".join(cell.ljust(w) for cell, w in zip(row, widths, strict=False)))
