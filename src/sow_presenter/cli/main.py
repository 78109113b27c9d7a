"""Main entry point for the sow-presenter CLI.

Provides a Typer-based CLI for running the presenter service and managing
schedules, songs and configuration.
"""

from pathlib import Path
from typing import Optional

import typer
from rich.panel import Panel

from sow_presenter import __version__
from sow_presenter.cli.commands import db as db_commands
from sow_presenter.cli.commands import schedule as schedule_commands
from sow_presenter.cli.commands import song as song_commands
from sow_presenter.cli.helpers import console, load_config
from sow_presenter.config import get_config_path

# Create the main Typer app
app = typer.Typer(
    name="sow-presenter",
    help="Live lyrics and scripture presentation for Stream of Worship",
    rich_markup_mode="rich",
)

# Add subcommand groups
app.add_typer(db_commands.app, name="db", help="Database operations")
app.add_typer(song_commands.app, name="song", help="Song catalog operations")
app.add_typer(schedule_commands.app, name="schedule", help="Schedule operations")


def version_callback(value: bool) -> None:
    """Callback for --version flag."""
    if value:
        console.print(f"sow-presenter version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """sow-presenter: live presentation for Stream of Worship.

    Build service schedules of songs, scriptures and images, then present
    them slide by slide to every connected display.

    ## Getting Started

    1. Initialize the database:
       [dim]$ sow-presenter db init[/dim]

    2. Add a song and a schedule:
       [dim]$ sow-presenter song add "Amazing Grace" --file amazing_grace.txt[/dim]
       [dim]$ sow-presenter schedule create "Sunday Service"[/dim]

    3. Start the service for displays to connect to:
       [dim]$ sow-presenter serve[/dim]
    """
    pass


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Interface to bind (overrides config)"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port to listen on (overrides config)"),
    config_path: Path = typer.Option(None, "--config", "-c", help="Path to config file"),
) -> None:
    """Run the presenter HTTP and WebSocket service."""
    import uvicorn

    from sow_presenter.server.app import create_app

    config = load_config(config_path)
    if host:
        config.host = host
    if port:
        config.port = port

    console.print(f"[green]Serving on http://{config.host}:{config.port}[/green]")
    console.print(f"[dim]Logs: {config.log_dir}[/dim]")

    uvicorn.run(
        create_app(config, console_logging=True),
        host=config.host,
        port=config.port,
        reload=False,
    )


@app.command()
def config(
    action: str = typer.Argument(
        ...,
        help="Action to perform (show, set, path)",
    ),
    key: str = typer.Argument(
        None,
        help="Configuration key (for set action)",
    ),
    value: str = typer.Argument(
        None,
        help="Configuration value (for set action)",
    ),
    config_path: Path = typer.Option(None, "--config", "-c", help="Path to config file"),
) -> None:
    """Manage configuration.

    Show, set, or display the path to the configuration file.

    Examples:
        sow-presenter config show          # Show all configuration
        sow-presenter config set presenter.max_lines_per_slide 6
        sow-presenter config path          # Show config file path
    """
    if action == "show":
        cfg = load_config(config_path)

        panel = Panel.fit(
            f"[cyan]Database Path:[/cyan] {cfg.db_path}\n"
            f"[cyan]Max Lines Per Slide:[/cyan] {cfg.max_lines_per_slide}\n"
            f"[cyan]Subscriber Queue Size:[/cyan] {cfg.subscriber_queue_size}\n"
            f"[cyan]Bible Directory:[/cyan] {cfg.bible_dir}\n"
            f"[cyan]Default Bible Version:[/cyan] {cfg.default_bible_version}\n"
            f"[cyan]Host:[/cyan] {cfg.host}\n"
            f"[cyan]Port:[/cyan] {cfg.port}\n"
            f"[cyan]Log Directory:[/cyan] {cfg.log_dir}",
            title="Configuration",
            border_style="green",
        )
        console.print(panel)

    elif action == "set":
        if not key or value is None:
            console.print("[red]Usage: sow-presenter config set <key> <value>[/red]")
            raise typer.Exit(1)

        cfg = load_config(config_path)
        try:
            cfg.set(key, value)
        except ValueError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(1)
        cfg.save(config_path)
        console.print(f"[green]Set {key} = {value}[/green]")

    elif action == "path":
        console.print(str(config_path or get_config_path()))

    else:
        console.print(f"[red]Unknown action: {action}[/red]")
        console.print("Valid actions: show, set, path")
        raise typer.Exit(1)


def cli_entry() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    cli_entry()
