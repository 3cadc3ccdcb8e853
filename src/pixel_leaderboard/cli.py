"""Click-based CLI for Pixel Leaderboard."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import click

from pixel_leaderboard.config import load_config
from pixel_leaderboard.exceptions import LeaderboardError
from pixel_leaderboard.formatter import apply_to_html, format_cli_output, format_json
from pixel_leaderboard.pipeline import build_leaderboard


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(name)s: %(message)s",
    )


@click.group()
@click.version_option(package_name="pixel-leaderboard")
def main() -> None:
    """Pixel Leaderboard - top contributors by merged pull requests."""


@main.command()
@click.option("--config", "config_path", default=None, help="Config file path")
@click.option("--verbose", "-v", is_flag=True, help="Show detailed output")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def show(config_path: str | None, verbose: bool, output_json: bool) -> None:
    """Print the current leaderboard."""
    _configure_logging(verbose)
    try:
        config = load_config(config_path)
        board = asyncio.run(build_leaderboard(config))
    except LeaderboardError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    if output_json:
        click.echo(format_json(board))
    else:
        click.echo(format_cli_output(board, verbose=verbose))


@main.command()
@click.argument("page", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the rendered page here instead of updating PAGE in place",
)
@click.option("--config", "config_path", default=None, help="Config file path")
@click.option("--verbose", "-v", is_flag=True, help="Show detailed output")
def render(page: Path, output: Path | None, config_path: str | None, verbose: bool) -> None:
    """Fill the leaderboard rows of an HTML PAGE."""
    _configure_logging(verbose)
    try:
        config = load_config(config_path)
        board = asyncio.run(build_leaderboard(config))
        document = page.read_text(encoding="utf-8")
        rendered = apply_to_html(document, board.slots)
        target = output or page
        target.write_text(rendered, encoding="utf-8")
    except OSError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    except LeaderboardError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    filled = sum(1 for slot in board.slots if not slot.is_placeholder)
    click.echo(f"Wrote {target} ({filled} of {len(board.slots)} slots filled)")
    if not board.fetch.complete:
        click.echo(
            f"Warning: partial data, stopped after {board.fetch.pages_fetched} page(s)",
            err=True,
        )
