"""Song catalog commands for sow-presenter."""

from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from sow_presenter.cli.helpers import close_editor, console, get_editor, load_config
from sow_presenter.core.chunker import count_slides
from sow_presenter.errors import PresenterError

app = typer.Typer(help="Song catalog operations")


@app.command("add")
def add_song(
    title: str = typer.Argument(..., help="Song title"),
    lyrics_file: Optional[Path] = typer.Option(
        None,
        "--file",
        "-f",
        help="Read lyrics from a text file (blank lines separate verses)",
    ),
    content: Optional[str] = typer.Option(
        None,
        "--content",
        help="Lyrics text",
    ),
    config_path: Path = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file",
    ),
) -> None:
    """Add a song to the catalog."""
    if lyrics_file and content:
        console.print("[red]Use either --file or --content, not both[/red]")
        raise typer.Exit(1)

    if lyrics_file:
        if not lyrics_file.exists():
            console.print(f"[red]Lyrics file not found: {lyrics_file}[/red]")
            raise typer.Exit(1)
        content = lyrics_file.read_text(encoding="utf-8")

    config = load_config(config_path)
    editor = get_editor(config)
    try:
        song = editor.catalog.create_song(title, content)
    finally:
        close_editor(editor)

    slides = count_slides(song.content, config.max_lines_per_slide)
    console.print(f"[green]Added song {song.id}: {song.title} ({slides} slides)[/green]")


@app.command("list")
def list_songs(
    search: str = typer.Option("", "--search", "-s", help="Filter by title"),
    limit: int = typer.Option(50, "--limit", "-l", help="Maximum number of songs"),
    config_path: Path = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file",
    ),
) -> None:
    """List songs in the catalog."""
    config = load_config(config_path)
    editor = get_editor(config)
    try:
        songs = editor.catalog.search_songs(search, limit=limit)
    finally:
        close_editor(editor)

    if not songs:
        console.print("[yellow]No songs found.[/yellow]")
        return

    table = Table(title=f"Songs ({len(songs)})")
    table.add_column("ID", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Slides", justify="right")

    for song in songs:
        table.add_row(song.id, song.title, str(count_slides(song.content, config.max_lines_per_slide)))

    console.print(table)


@app.command("remove")
def remove_song(
    song_id: str = typer.Argument(..., help="Song ID"),
    config_path: Path = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file",
    ),
) -> None:
    """Remove a song that no schedule uses."""
    editor = get_editor(load_config(config_path))
    try:
        deleted = editor.catalog.delete_song(song_id)
    except PresenterError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    finally:
        close_editor(editor)

    if not deleted:
        console.print(f"[red]Song not found: {song_id}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Removed song {song_id}[/green]")
