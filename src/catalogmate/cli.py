#!/usr/bin/env python3
"""
Catalogmate command line tool - manage the catalog index, ingest files and search.

Usage:
    # Create the catalog index (name from OPENSEARCH_INDEX_NAME or the default)
    catalogmate create-index --force-recreate

    # Check how the headers of a file would be normalized
    catalogmate preview products.xlsx

    # Ingest a file for a tenant
    catalogmate ingest products.csv --tenant acme --user alice

    # Search
    catalogmate search --tenant acme --keyword pipe --size 10
"""

import json
from pathlib import Path
from typing import Dict, Optional

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from catalogmate.models.filters import FilterSpec
from catalogmate.models.search import SearchQuery
from catalogmate.services.catalog_services import CatalogServices, CatalogServicesFactory
from catalogmate.services.opensearch_infra_service import create_opensearch_infra_service

app = typer.Typer(help="Catalogmate - schema-less product catalog ingestion and search")
console = Console()


def _services(env_file: Optional[Path]) -> CatalogServices:
    if env_file:
        return CatalogServicesFactory.from_env_file(env_file)
    return CatalogServicesFactory.create_default()


def _read_file(path: Path) -> bytes:
    if not path.is_file():
        console.print(f"[red]✗ File not found: {path}[/red]")
        raise typer.Exit(code=1)
    return path.read_bytes()


@app.command("create-index")
def create_index(
    index_name: Optional[str] = typer.Option(
        None,
        "--index",
        "-i",
        help="Index name (uses default from settings if not provided)"
    ),
    force_recreate: bool = typer.Option(
        False,
        "--force-recreate",
        "-f",
        help="Delete existing index and recreate"
    ),
    env_file: Optional[Path] = typer.Option(None, "--env-file", help="Load settings from this .env file"),
):
    """Create the catalog index with its mapping"""
    infra_service = create_opensearch_infra_service(env_path=env_file)
    target_index = index_name or infra_service.default_index_name

    health = infra_service.get_cluster_health()
    if not health.get("healthy"):
        console.print(f"[red]✗ OpenSearch cluster is not healthy: {health}[/red]")
        raise typer.Exit(code=1)

    console.print(f"\n[bold cyan]Creating index: {target_index}[/bold cyan]")
    if infra_service.create_index(index_name=target_index, force_recreate=force_recreate):
        console.print(f"[green]✓ Index ready: {target_index}[/green]")
    else:
        console.print(f"[red]✗ Failed to create index: {target_index}[/red]")
        raise typer.Exit(code=1)


@app.command("delete-index")
def delete_index(
    index_name: Optional[str] = typer.Option(None, "--index", "-i", help="Index name to delete"),
    confirm: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt"),
    env_file: Optional[Path] = typer.Option(None, "--env-file", help="Load settings from this .env file"),
):
    """Delete the catalog index"""
    infra_service = create_opensearch_infra_service(env_path=env_file)
    target_index = index_name or infra_service.default_index_name

    if not confirm and not typer.confirm(f"Are you sure you want to delete index '{target_index}'?"):
        console.print("[yellow]Deletion cancelled[/yellow]")
        return

    if infra_service.delete_index(target_index):
        console.print(f"[green]✓ Successfully deleted index: {target_index}[/green]")
    else:
        console.print(f"[red]✗ Failed to delete index: {target_index}[/red]")
        raise typer.Exit(code=1)


@app.command()
def stats(
    index_name: Optional[str] = typer.Option(None, "--index", "-i", help="Index name"),
    env_file: Optional[Path] = typer.Option(None, "--env-file", help="Load settings from this .env file"),
):
    """Show document count, size and health of the catalog index"""
    infra_service = create_opensearch_infra_service(env_path=env_file)
    stats = infra_service.get_index_stats(index_name)

    if not stats.get("exists"):
        console.print(f"[red]✗ Index '{stats.get('index_name')}' does not exist[/red]")
        return
    if stats.get("error"):
        console.print(f"[red]Error: {stats.get('error')}[/red]")
        return

    console.print(f"[bold cyan]Index: {stats.get('index_name')}[/bold cyan]")
    console.print(f"  Health: {stats.get('health')}")
    console.print(f"  Status: {stats.get('status')}")
    console.print(f"  Total documents: {stats.get('total_documents')}")
    console.print(f"  Index size: {stats.get('index_size')}\n")


@app.command()
def preview(
    file: Path = typer.Argument(..., help="CSV or Excel file"),
    env_file: Optional[Path] = typer.Option(None, "--env-file", help="Load settings from this .env file"),
):
    """Show the normalized key each column header would get"""
    result = _services(env_file).ingestion.preview_headers(file.name, _read_file(file))
    if result.is_err():
        console.print(f"[red]✗ {result.unwrap_err().message}[/red]")
        raise typer.Exit(code=1)

    table = Table(title=f"Headers of {file.name}", show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right")
    table.add_column("Original header", style="cyan")
    table.add_column("Normalized key", style="green")
    for index, column in enumerate(result.unwrap()):
        table.add_row(str(index), column.original_header, column.normalized_key)
    console.print(table)


@app.command()
def ingest(
    file: Path = typer.Argument(..., help="CSV or Excel file; the first row holds the headers"),
    tenant: str = typer.Option(..., "--tenant", "-t", help="Tenant owning the products"),
    user: str = typer.Option("cli", "--user", "-u", help="Uploader identity"),
    env_file: Optional[Path] = typer.Option(None, "--env-file", help="Load settings from this .env file"),
):
    """Ingest a spreadsheet into the catalog"""
    logger.info(f"Ingesting {file} for tenant {tenant}")
    result = _services(env_file).ingestion.ingest(tenant, file.name, _read_file(file), user)
    if result.is_err():
        console.print(f"[red]✗ {result.unwrap_err().message}[/red]")
        raise typer.Exit(code=1)

    summary = result.unwrap()
    color = "yellow" if summary.is_partial() else "green"
    console.print(f"[{color}]Stored {summary.count} of {summary.attempted} products from {summary.file_name}[/{color}]")
    if summary.business_ids:
        console.print(f"  First id: {summary.business_ids[0]}  Last id: {summary.business_ids[-1]}")


def _parse_filters(filters: Optional[str]) -> Dict[str, FilterSpec]:
    if not filters:
        return {}
    raw = json.loads(filters)
    if not isinstance(raw, dict):
        raise typer.BadParameter("must be a JSON object of attribute key to filter", param_hint="--filters")
    return {key: FilterSpec.model_validate(spec) for key, spec in raw.items()}


@app.command()
def search(
    tenant: str = typer.Option(..., "--tenant", "-t", help="Tenant to search"),
    keyword: Optional[str] = typer.Option(None, "--keyword", "-k", help="Free-text keyword"),
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Exact category"),
    filters: Optional[str] = typer.Option(
        None,
        "--filters",
        help='JSON object of attribute filters, e.g. \'{"weight": {"type": "RANGE", "min": 1}}\''
    ),
    page: int = typer.Option(0, "--page", help="Zero-based page number"),
    size: Optional[int] = typer.Option(None, "--size", help="Page size (CATALOG_DEFAULT_PAGE_SIZE if omitted)"),
    env_file: Optional[Path] = typer.Option(None, "--env-file", help="Load settings from this .env file"),
):
    """Search the catalog of a tenant"""
    services = _services(env_file)
    try:
        parsed_filters = _parse_filters(filters)
        query = SearchQuery(keyword=keyword, category=category, filters=parsed_filters, page=page,
                            size=size or services.settings.default_page_size)
    except ValueError as e:
        console.print(f"[red]✗ Invalid search arguments: {e}[/red]")
        raise typer.Exit(code=1)

    result = services.search.search(tenant, query)
    if result.is_err():
        console.print(f"[red]✗ {result.unwrap_err().message}[/red]")
        raise typer.Exit(code=1)

    search_page = result.unwrap()
    table = Table(title=f"Results ({search_page.total} total)", show_header=True, header_style="bold cyan")
    table.add_column("Product id", style="cyan")
    table.add_column("Display name")
    table.add_column("Category")
    table.add_column("Attributes", justify="right")
    for document in search_page.items:
        table.add_row(
            document.business_id,
            document.display_name or "-",
            document.category or "-",
            str(len(document.attributes)),
        )
    console.print(table)
    console.print(f"[dim]Page {search_page.page + 1} of {max(search_page.total_pages, 1)}[/dim]")


@app.command()
def filters(
    tenant: str = typer.Option(..., "--tenant", "-t", help="Tenant to inspect"),
    env_file: Optional[Path] = typer.Option(None, "--env-file", help="Load settings from this .env file"),
):
    """List the filterable attribute keys of a tenant"""
    result = _services(env_file).search.list_available_filters(tenant)
    if result.is_err():
        console.print(f"[red]✗ {result.unwrap_err().message}[/red]")
        raise typer.Exit(code=1)

    table = Table(title="Available filters", show_header=True, header_style="bold cyan")
    table.add_column("Key", style="cyan")
    table.add_column("Name")
    table.add_column("Type", justify="center")
    table.add_column("Values", justify="right")
    for descriptor in result.unwrap():
        table.add_row(
            descriptor.attribute_key,
            descriptor.display_name,
            str(descriptor.type),
            str(len(descriptor.available_values)),
        )
    console.print(table)


@app.command()
def values(
    key: str = typer.Argument(..., help="Normalized attribute key"),
    tenant: str = typer.Option(..., "--tenant", "-t", help="Tenant to inspect"),
    env_file: Optional[Path] = typer.Option(None, "--env-file", help="Load settings from this .env file"),
):
    """List the distinct values of one attribute key"""
    result = _services(env_file).search.distinct_values(tenant, key)
    if result.is_err():
        console.print(f"[red]✗ {result.unwrap_err().message}[/red]")
        raise typer.Exit(code=1)

    for value in result.unwrap():
        console.print(value)


if __name__ == "__main__":
    app()
