"""
Main CLI application using Typer.
"""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, List, Optional

import typer
from rich.console import Console
from rich.table import Table

from ..adapters.file_store import FileProductRepository, FileTimeRuleStore
from ..adapters.http_store import DocumentApiClient, HttpProductRepository, HttpTimeRuleStore
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import ConfigError, MalformedRuleError, RepositoryUnavailableError
from ..domain.models import parse_time_of_day
from ..services.catalog_service import CatalogAvailabilityService
from ..services.catalog_view import CatalogView

app = typer.Typer(
    name="slotcatalog",
    help="Inspect time-slot gated product availability",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")]
AtOption = Annotated[Optional[str], typer.Option("--at", help="Evaluate at this time of day (HH:MM) instead of now")]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging")]


def _setup_logging(config: AppConfig, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else config.log_level,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )


def _load(config_file: Optional[Path], verbose: bool) -> AppConfig:
    config_path = config_file or get_default_config_path()
    config = AppConfig.load_from_yaml(config_path)
    _setup_logging(config, verbose)
    return config


def _build_service(config: AppConfig) -> CatalogAvailabilityService:
    """Wire the configured sources into the catalog service."""
    if config.source == "http":
        client = DocumentApiClient(
            base_url=config.http.base_url,
            timeout=config.http.timeout_seconds,
            api_key=config.http.api_key,
        )
        rule_store = HttpTimeRuleStore(client)
        product_repository = HttpProductRepository(client)
    else:
        rule_store = FileTimeRuleStore(config.files.rules_path)
        product_repository = FileProductRepository(config.files.catalog_path)

    return CatalogAvailabilityService(
        rule_store=rule_store,
        product_repository=product_repository,
        timezone=config.timezone,
    )


def _parse_at(at: Optional[str]):
    """Parse the --at option; None means the current time."""
    if at is None:
        return None
    try:
        return parse_time_of_day(at, field_name="--at")
    except MalformedRuleError:
        console.print(f"[red]Error: invalid --at value '{at}', expected HH:MM[/red]")
        raise typer.Exit(1)


def _fail(error: Exception) -> None:
    if isinstance(error, RepositoryUnavailableError):
        console.print(f"[bold red]Error:[/bold red] {error}")
        console.print("[yellow]The data source is unavailable. Please try again.[/yellow]")
    else:
        console.print(f"[bold red]Error:[/bold red] {error}")
    raise typer.Exit(1)


@app.command()
def slot(
    config_file: ConfigOption = None,
    at: AtOption = None,
    verbose: VerboseOption = False,
):
    """
    Show the time slot that is active now.
    """
    try:
        config = _load(config_file, verbose)
        service = _build_service(config)
        matches = asyncio.run(service.matching_slots(now=_parse_at(at)))

        if not matches:
            console.print("[yellow]⚠ No time slot is active right now. Nothing is available.[/yellow]")
            return

        active = matches[0]
        console.print(
            f"[bold green]✓ Active slot:[/bold green] {active.display_name} "
            f"({active.slot_id}, {active.start_time} – {active.end_time})"
        )

        if len(matches) > 1:
            overlapping = ", ".join(rule.slot_id for rule in matches[1:])
            console.print(
                f"[yellow]⚠ Overlapping slots also match: {overlapping}. "
                f"The first configured slot wins.[/yellow]"
            )

    except (ConfigError, RepositoryUnavailableError) as e:
        _fail(e)


@app.command()
def categories(
    config_file: ConfigOption = None,
    at: AtOption = None,
    verbose: VerboseOption = False,
):
    """
    List the categories that can be sold right now.
    """
    try:
        config = _load(config_file, verbose)
        service = _build_service(config)
        allowed = asyncio.run(service.get_available_categories(now=_parse_at(at)))

        if not allowed:
            console.print("[yellow]⚠ No categories are available right now.[/yellow]")
            return

        table = Table(
            title="Available categories",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("ID", style="dim")
        table.add_column("Name", style="bold yellow")

        for category in allowed:
            table.add_row(category.id, category.name)

        console.print()
        console.print(table)
        console.print()

    except (ConfigError, RepositoryUnavailableError) as e:
        _fail(e)


@app.command()
def products(
    query: Annotated[Optional[str], typer.Option("--query", "-q", help="Search text")] = None,
    category: Annotated[Optional[List[str]], typer.Option("--category", help="Category id to narrow to (repeatable)")] = None,
    page: Annotated[int, typer.Option("--page", "-p", min=1, help="Page to show")] = 1,
    config_file: ConfigOption = None,
    at: AtOption = None,
    verbose: VerboseOption = False,
):
    """
    List the products to show for a search, one page at a time.

    Examples:

        slotcatalog products
        slotcatalog products --query bisc
        slotcatalog products --category veg --category fruit --page 2
        slotcatalog products --at 23:30
    """
    try:
        config = _load(config_file, verbose)
        service = _build_service(config)
        view = CatalogView(service, per_page=config.catalog.page_size)

        result = asyncio.run(view.refresh(query=query, category=category, now=_parse_at(at)))
        for _ in range(page - 1):
            result = view.next_page()

        if result is None or not result.total:
            console.print("[yellow]⚠ No products found.[/yellow]")
            return
        if not result.items:
            console.print(f"[yellow]⚠ Page {page} is past the end ({result.total} results).[/yellow]")
            return

        table = Table(
            title=f"Products (page {result.page}, {result.total} total)",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("ID", style="dim")
        table.add_column("Name", style="bold yellow")
        table.add_column("Categories")
        table.add_column("Tags", style="dim")

        for product in result.items:
            table.add_row(
                product.id,
                product.name,
                ", ".join(c.name or c.id for c in product.categories),
                ", ".join(product.tags),
            )

        console.print()
        console.print(table)
        if result.has_more:
            console.print(f"More results available: --page {result.page + 1}")
        console.print()

    except (ConfigError, RepositoryUnavailableError) as e:
        _fail(e)


@app.command()
def rules(
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """
    List all configured time rules.
    """
    try:
        config = _load(config_file, verbose)
        service = _build_service(config)
        configured = asyncio.run(service.get_time_rules())

        if not configured:
            console.print("[yellow]No time rules configured.[/yellow]")
            return

        table = Table(
            title="Configured time rules",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Slot", style="bold yellow")
        table.add_column("Name")
        table.add_column("Window")
        table.add_column("Status")
        table.add_column("Categories", style="dim")

        for rule in configured:
            try:
                rule.window()
                status = "[green]active[/green]" if rule.is_active else "[dim]inactive[/dim]"
            except MalformedRuleError:
                status = "[red]invalid time[/red]"

            table.add_row(
                rule.slot_id,
                rule.display_name,
                f"{rule.start_time} – {rule.end_time}",
                status,
                ", ".join(c.name or c.id for c in rule.allowed_categories),
            )

        console.print()
        console.print(table)
        console.print()

    except (ConfigError, RepositoryUnavailableError) as e:
        _fail(e)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]slotcatalog[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
