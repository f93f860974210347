"""
Build commands: build, check.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from tokensmith.core.errors import TokenError
from tokensmith.core.manifest import MANIFEST_FILE, load_manifest
from tokensmith.core.pipeline import BuildResult, TokenPipeline

from .utils import configure_logging

console = Console()


def _run(manifest: str, write: bool) -> BuildResult:
    manifest_path = Path(manifest).resolve()
    try:
        return TokenPipeline(load_manifest(manifest_path)).run(write=write)
    except TokenError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


def build_command(
    manifest: str = typer.Option(MANIFEST_FILE, "--manifest", "-m", help="Path to tokensmith.toml"),
    verbose: bool = typer.Option(False, "--verbose", help="Log stage progress"),
) -> None:
    """
    Compile the token sources and write every configured artifact.

    Either all artifacts are written or, on any error, none are.

    Examples:
        tokensmith build
        tokensmith build --manifest design/tokensmith.toml --verbose
    """
    configure_logging(verbose)
    result = _run(manifest, write=True)

    for name, path in result.artifacts.items():
        typer.echo(f"  {name}: {path}")
    typer.echo(
        f"OK: {sum(result.token_counts.values())} tokens compiled, "
        f"{result.dark_override_count} dark override(s)."
    )


def check_command(
    manifest: str = typer.Option(MANIFEST_FILE, "--manifest", "-m", help="Path to tokensmith.toml"),
    verbose: bool = typer.Option(False, "--verbose", help="Log stage progress"),
) -> None:
    """
    Run every stage except writing and summarize the result.

    Exits non-zero on the first error, exactly as build would.
    """
    configure_logging(verbose)
    result = _run(manifest, write=False)

    table = Table(title="Design tokens")
    table.add_column("Theme", style="cyan")
    table.add_column("Tokens", justify="right")
    for theme, count in result.token_counts.items():
        table.add_row(theme, str(count))
    table.add_row("dark overrides", str(result.dark_override_count), style="dim")
    console.print(table)

    if result.asymmetric_paths:
        console.print(
            f"[yellow]{len(result.asymmetric_paths)} path(s) defined by only one overlay[/yellow]"
        )
    console.print("[green]OK[/green]: sources compile cleanly")
