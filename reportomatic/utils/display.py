"""Utility functions to print formatted CLI messages for run summaries."""

from __future__ import annotations

import click

__all__ = ["echo_banner", "echo_success", "echo_section", "echo_warning"]


def echo_banner(text: str) -> None:
    """Print a cyan banner announcing a run or a period.

    Args:
        text: Banner text.
    """
    click.secho(f"\n=== {text} ===", fg="cyan")


def echo_section(text: str) -> None:
    """Echo a magenta header used for per-form blocks in the summary."""
    click.secho(f"\n  -- {text} --", fg="magenta")


def echo_success(text: str) -> None:
    """Echo a green success message prefixed with a tick.

    Args:
        text: Message to display.
    """
    click.secho(f"✓ {text}", fg="green")


def echo_warning(text: str) -> None:
    click.secho(f"! {text}", fg="yellow")
