"""
CLI Entry Point

Typer-based command line interface for the Table Modeler.
"""

import os
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from table_modeler.config import (
    CONFIG_ENV_VAR,
    ConfigLoader,
    ModelerConfig,
    create_classifier,
    create_client,
    create_logger,
    create_metadata_service,
)
from table_modeler.core.schema import ColumnKind, TableModel, TableModelBuilder
from table_modeler.platform import MetadataServiceError, PlatformConnectionError


# Initialize Typer app
app = typer.Typer(
    name="table-modeler",
    help="Table Modeler - Describe platform tables without elevated access",
    add_completion=False,
)

console = Console()


def load_config(config_path: Optional[str], catalog: Optional[str] = None) -> ModelerConfig:
    """Load configuration from a file, or build one around a catalog path."""
    if catalog:
        if config_path:
            console.print("[red]Error:[/] Use either --config or --catalog, not both")
            raise typer.Exit(1)
        return ModelerConfig(catalog=catalog)

    if not config_path:
        console.print("[red]Error:[/] A configuration file (--config) or catalog (--catalog) is required")
        raise typer.Exit(1)

    try:
        return ConfigLoader().load(config_path)
    except FileNotFoundError:
        console.print(f"[red]Error:[/] Configuration file not found: {config_path}")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]Configuration error:[/] {e}")
        raise typer.Exit(1)


def render_model(model: TableModel) -> Table:
    """Rich table for a TableModel."""
    table = Table(title=f"{model.label} ({model.table})", show_header=True, header_style="bold")
    table.add_column("Column", style="cyan")
    table.add_column("Label")
    table.add_column("Type")
    table.add_column("Len", justify="right")
    table.add_column("Flags")
    table.add_column("Detail")

    for column in model:
        flags = []
        if column.mandatory:
            flags.append("[red]mandatory[/]")
        if column.inherited:
            flags.append(f"[dim]from {column.declaring_table}[/]")
        if column.auto_generated:
            flags.append("[yellow]auto[/]")
        if column.virtual:
            flags.append("[magenta]virtual[/]")

        if column.reference_detail:
            ref = column.reference_detail
            detail = f"→ {ref.target_table} ({ref.label}, shows {ref.display_field})"
        elif column.choice_entries:
            detail = ", ".join(f"{e.value}={e.label}" for e in column.choice_entries)
            if column.kind == ColumnKind.DISCRIMINATOR:
                detail = f"[bold]{detail}[/]"
        else:
            detail = ""

        table.add_row(
            column.name,
            column.label,
            column.internal_type,
            str(column.max_length),
            " ".join(flags),
            detail,
        )

    return table


@app.command()
def describe(
    table: str = typer.Argument(..., help="Name of the table to describe"),
    config_path: Optional[str] = typer.Option(None, "--config", "-c", help="Path to configuration file"),
    catalog: Optional[str] = typer.Option(None, "--catalog", help="Path to an offline table catalog (YAML)"),
    as_json: bool = typer.Option(False, "--json", help="Print the model as JSON"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write the model as JSON to a file"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="No progress output"),
):
    """
    Describe every column of a table.

    Example:
        table-modeler describe incident --catalog catalog.yaml
    """
    config = load_config(config_path, catalog)

    try:
        service = create_metadata_service(config)
    except (FileNotFoundError, ValueError, MetadataServiceError) as e:
        console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(1)
    except PlatformConnectionError as e:
        console.print(f"[red]Connection error:[/] {e}")
        raise typer.Exit(1)

    logger = create_logger(config, console_output=False if quiet else None)
    builder = TableModelBuilder(service, classifier=create_classifier(config), logger=logger)

    result = builder.build(table)
    if not result.ok:
        console.print(f"[red]{result.failure.kind.value}:[/] {result.failure.message}")
        raise typer.Exit(1)

    model = result.model

    if output:
        path = Path(output)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(model.to_json(), encoding="utf-8")
        if not as_json:
            console.print(f"Model saved to: {output}")

    if as_json:
        typer.echo(model.to_json())
    elif not output:
        console.print(render_model(model))


@app.command("test-connection")
def test_connection(
    config_path: str = typer.Argument(..., help="Path to configuration file"),
):
    """
    Test connection to the platform.
    """
    config = load_config(config_path)

    if config.platform is None:
        console.print(f"[yellow]No platform configured; using catalog {config.catalog}[/]")
        raise typer.Exit(0)

    console.print(f"\n[bold]Testing connection[/]")
    console.print(f"  URL: {config.platform.url}")
    console.print(f"  Database: {config.platform.database}")
    console.print(f"  Username: {config.platform.username}")

    try:
        client = create_client(config)
        version_info = client.version()
        console.print(f"\n  [green]✓ Authentication successful[/]")
        console.print(f"  Server version: {version_info.get('server_version', 'Unknown')}")
        console.print(f"\n[green]Connection test successful![/]")
    except PlatformConnectionError as e:
        console.print(f"\n[red]Connection failed:[/] {e}")
        raise typer.Exit(1)


@app.command("init-config")
def init_config(
    output: str = typer.Argument("config.yaml", help="Output configuration file path"),
):
    """
    Create an example configuration file.
    """
    ConfigLoader.create_example_config(output)
    console.print(f"[green]Example configuration created:[/] {output}")
    console.print("\nEdit this file and set the following environment variables:")
    console.print("  - PLATFORM_URL")
    console.print("  - PLATFORM_DB")
    console.print("  - PLATFORM_USER")
    console.print("  - PLATFORM_PASSWORD")


@app.command()
def serve(
    config_path: str = typer.Argument(..., help="Path to configuration file"),
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Bind port"),
):
    """
    Serve table models over HTTP.
    """
    import uvicorn

    load_config(config_path)
    os.environ[CONFIG_ENV_VAR] = str(Path(config_path).resolve())
    uvicorn.run("table_modeler.api.main:app", host=host, port=port)


@app.command()
def version():
    """Show version information."""
    from table_modeler import __version__
    console.print(f"Table Modeler v{__version__}")


if __name__ == "__main__":
    app()
