#!/usr/bin/env python3
"""CAPS Generator CLI - build Cursor starter kits from a project description.

Usage:
    # Generate a kit from a wizard-style JSON request
    python main.py generate --input ./request.json

    # Override the provider and output file
    python main.py generate --input ./request.json --provider anthropic --output ./kit.zip

    # Show which providers have credentials configured
    python main.py providers

    # Run the HTTP API
    python main.py serve --port 8000
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

try:
    import click
    from rich.console import Console
    from rich.logging import RichHandler
    from rich.panel import Panel
    from rich.table import Table
except ImportError:
    print("Missing dependencies. Run: pip install click rich")
    sys.exit(1)

from api.validation import validate_request
from config import settings
from contracts import ProviderName, TaskStatus
from errors import CapsError
from orchestrator import KitManager
from providers import PROVIDERS, list_providers as get_available_providers


console = Console()


def configure_logging(level: str, verbose: bool = False) -> None:
    """Route log records through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
    )


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
def cli(verbose: bool):
    """CAPS Generator: project description in, Cursor starter kit out."""
    configure_logging(settings.log_level, verbose)


@cli.command()
@click.option(
    "--input", "-i", "input_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Path to a JSON request (same shape as the HTTP API body)"
)
@click.option(
    "--output", "-o", "output_path",
    default=None,
    help="Archive path (default: ./outputs/cursor-starter-kit-<timestamp>.zip)"
)
@click.option(
    "--provider", "-p",
    type=click.Choice([p.value for p in ProviderName]),
    default=None,
    help="LLM provider (default: the request's selectedAIProvider)"
)
def generate(input_path: str, output_path: Optional[str], provider: Optional[str]):
    """Generate a starter kit archive from a request file."""
    console.print(Panel.fit(
        "[bold blue]CAPS Generator[/bold blue]\n"
        "[dim]Cursor starter kit builder[/dim]",
        border_style="blue"
    ))

    try:
        request = validate_request(Path(input_path).read_bytes())
        if provider:
            request = request.model_copy(update={"selected_provider": ProviderName(provider)})

        console.print(f"\n[dim]Provider:[/dim] {request.selected_provider.value}")
        manager = KitManager(settings=settings)
        with console.status("[bold green]Generating documents..."):
            kit = asyncio.run(manager.build(request))
        saved = manager.save(kit, Path(output_path) if output_path else None)
    except CapsError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        sys.exit(1)

    table = Table(title="Generation results")
    table.add_column("Document")
    table.add_column("Status")
    for key, status in kit.results.items():
        style = "green" if status == TaskStatus.SUCCESS else "red"
        table.add_row(key, f"[{style}]{status.value}[/{style}]")
    if kit.results:
        console.print(table)
    else:
        console.print("[dim]No dynamic documents requested; static rules only.[/dim]")

    console.print(f"\n[green]Archive written:[/green] {saved} ({len(kit.files)} files)")


@cli.command(name="providers")
def show_providers():
    """List providers and whether their credentials are configured."""
    console.print("[bold]Available LLM Providers:[/bold]\n")
    for name, available in get_available_providers(settings).items():
        status = "[green]✓ Ready[/green]" if available else "[red]✗ No API key[/red]"
        console.print(f"  {name:12} {status}")
    console.print("\n[dim]Set API keys via environment variables:[/dim]")
    console.print("  " + ", ".join(spec.credential_envs[0] for spec in PROVIDERS.values()))


@cli.command()
@click.option("--host", default=None, help=f"Bind address (default: {settings.host})")
@click.option("--port", type=int, default=None, help=f"Port (default: {settings.port})")
def serve(host: Optional[str], port: Optional[int]):
    """Run the HTTP API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "api.app:app",
        host=host or settings.host,
        port=port or settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    cli()
