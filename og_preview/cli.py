"""CLI for link preview metadata."""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from og_preview.config import FetchConfig, PreviewSettings, load_fetch_config, load_settings
from og_preview.extractors import extract_links
from og_preview.models import FetchSuccess, LinkPreview, Metadata
from og_preview.service import MetadataService

# Load environment variables (override=True to beat shell env vars)
load_dotenv(override=True)

app = typer.Typer(
    name="og-preview",
    help="Open Graph link preview fetcher",
    add_completion=False,
)
console = Console()


def print_metadata(url: str, data: Metadata) -> None:
    """Print one resolved preview as a two-column table."""
    table = Table(title=escape(url[:80]), show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green", max_width=80)

    table.add_row("Image", escape(data.image_url or "-"))
    table.add_row("Title", escape(data.title or "-"))
    table.add_row("Description", escape(data.description or "-"))
    table.add_row("Site", escape(data.site_name or "-"))
    if data.image_width or data.image_height:
        table.add_row("Size", f"{data.image_width or '?'}x{data.image_height or '?'}")

    console.print(table)


def print_preview_summary(previews: list[LinkPreview]) -> None:
    """Print a summary table of document link previews."""
    table = Table(title=f"Link Previews ({len(previews)})")
    table.add_column("Link", style="cyan", max_width=30)
    table.add_column("URL", style="dim", max_width=40)
    table.add_column("Status", style="yellow")
    table.add_column("Title", style="green", max_width=40)

    for preview in previews:
        result = preview.result
        if isinstance(result, FetchSuccess):
            status = "cached" if result.from_cache else "fetched"
            title = result.data.title or "-"
        else:
            status = f"[red]{escape(result.reason)}[/red]"
            title = "-"
        table.add_row(
            escape(preview.link.text[:30]),
            escape(preview.link.url[:40]),
            status,
            escape(title[:40]),
        )

    console.print(table)


@app.command()
def fetch(
    url: str = typer.Argument(..., help="Page URL to resolve"),
    timeout: Optional[float] = typer.Option(None, "--timeout", "-t", help="Per-request timeout (seconds)"),
    retries: Optional[int] = typer.Option(None, "--retries", "-r", help="Extra attempts per relay"),
):
    """Fetch Open Graph metadata for a single URL."""
    config = load_fetch_config()
    overrides = {}
    if timeout is not None:
        overrides["timeout"] = timeout
    if retries is not None:
        overrides["retry_attempts"] = retries
    if overrides:
        config = FetchConfig(**{**config.model_dump(), **overrides})

    service = MetadataService(config=config)
    result = asyncio.run(service.fetch_metadata(url))

    if not isinstance(result, FetchSuccess):
        console.print(f"[red]Error: {escape(result.reason)}[/red]")
        raise typer.Exit(1)

    print_metadata(url, result.data)


@app.command()
def scan(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Markdown file"),
    limit: Optional[int] = typer.Option(None, "--limit", "-l", help="Max links to preview"),
    use_cache: bool = typer.Option(True, "--cache/--no-cache", help="Use the metadata cache"),
    settings_file: Optional[Path] = typer.Option(None, "--settings", help="Preview settings JSON"),
    workers: int = typer.Option(10, "--workers", "-w", help="Concurrent fetches"),
):
    """Resolve previews for every external link in a Markdown file."""
    settings = load_settings(settings_file)
    overrides = {"cache_enabled": settings.cache_enabled and use_cache}
    if limit is not None:
        overrides["max_images_per_page"] = limit
    settings = PreviewSettings(**{**settings.model_dump(), **overrides})

    if not settings.enabled:
        console.print("[yellow]Link previews are disabled in settings[/yellow]")
        raise typer.Exit(0)

    markdown = path.read_text(encoding="utf-8")
    service = MetadataService()
    previews = asyncio.run(service.preview_document(markdown, settings, max_concurrent=workers))

    if not previews:
        console.print("[yellow]No external links found[/yellow]")
        raise typer.Exit(0)

    print_preview_summary(previews)

    resolved = sum(1 for p in previews if isinstance(p.result, FetchSuccess))
    console.print(f"\n[bold]Scan Summary[/bold]")
    console.print(f"  Links previewed: {len(previews)}")
    console.print(f"  [green]Resolved: {resolved}[/green]")
    console.print(f"  [red]Failed: {len(previews) - resolved}[/red]")


@app.command()
def links(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Markdown file"),
    external_only: bool = typer.Option(False, "--external", "-e", help="Only http(s) links"),
):
    """List links found in a Markdown file (no network access)."""
    found = extract_links(path.read_text(encoding="utf-8"))
    if external_only:
        found = [link for link in found if link.is_external]

    if not found:
        console.print("[yellow]No links found[/yellow]")
        raise typer.Exit(0)

    table = Table(title=f"Links ({len(found)})")
    table.add_column("Text", style="cyan", max_width=30)
    table.add_column("URL", style="green", max_width=60)
    table.add_column("External", style="yellow")

    for link in found:
        table.add_row(escape(link.text[:30]), escape(link.url), "yes" if link.is_external else "no")

    console.print(table)


if __name__ == "__main__":
    app()
