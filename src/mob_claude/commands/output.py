"""Shared output helpers for mob-claude commands."""

import click


def echo_warnings(warnings: list[str]) -> None:
    """Print each warning to stderr."""
    for warning in warnings:
        click.echo(f"Warning: {warning}", err=True)


def fail(message: object) -> None:
    """Print an error to stderr and exit with status 1."""
    click.echo(f"Error: {message}", err=True)
    raise SystemExit(1)
