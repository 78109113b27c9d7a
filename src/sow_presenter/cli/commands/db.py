"""Database commands for sow-presenter.

Provides CLI commands for database initialization and status checking.
"""

from pathlib import Path

import typer
from rich.table import Table

from sow_presenter.cli.helpers import console, load_config
from sow_presenter.db.schedule_client import ScheduleClient

app = typer.Typer(help="Database operations")


@app.command("init")
def init_db(
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Delete the existing database first (destructive)",
    ),
    config_path: Path = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file",
    ),
) -> None:
    """Initialize the local database.

    Creates the database file with its tables, indexes and triggers. Use
    --force to start over with an empty database.
    """
    config = load_config(config_path)
    db_path = config.db_path

    if db_path.exists() and not force:
        console.print(f"[yellow]Database already exists at {db_path}[/yellow]")
        console.print("Use --force to re-initialize (this will delete all data)")
        raise typer.Exit(1)

    if force and db_path.exists():
        console.print(f"[red]Deleting database at {db_path}...[/red]")
        db_path.unlink()

    console.print(f"Creating database at {db_path}...")
    with ScheduleClient(db_path) as client:
        client.initialize_schema()
    console.print("[green]Database initialized successfully![/green]")

    # Show status after init
    show_status(config_path)


@app.command("status")
def show_status(
    config_path: Path = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file",
    ),
) -> None:
    """Show database status and table row counts."""
    config = load_config(config_path)
    db_path = config.db_path
    exists = db_path.exists()

    info_table = Table(title="Database Information")
    info_table.add_column("Property", style="cyan")
    info_table.add_column("Value", style="green")

    info_table.add_row("Database Path", str(db_path))
    info_table.add_row("Exists", "Yes" if exists else "No")

    if exists:
        size = db_path.stat().st_size
        info_table.add_row("File Size", f"{size:,} bytes ({size / 1024 / 1024:.2f} MB)")

    console.print(info_table)

    if not exists:
        console.print("\n[yellow]Database does not exist. Run 'sow-presenter db init' to create it.[/yellow]")
        return

    with ScheduleClient(db_path) as client:
        client.initialize_schema()
        counts = client.get_table_counts()

    stats_table = Table(title="Database Statistics")
    stats_table.add_column("Table", style="cyan")
    stats_table.add_column("Rows", style="green")

    for table, count in counts.items():
        stats_table.add_row(table, f"{count:,}")

    console.print(stats_table)
