"""Schedule commands for sow-presenter.

Provides CLI commands for building schedules and previewing how an entry
is cut into slides on a display.
"""

import asyncio
from pathlib import Path
from typing import List, Optional

import typer
from rich.panel import Panel
from rich.table import Table

from sow_presenter.cli.helpers import close_editor, console, get_editor, load_config
from sow_presenter.db.models import ItemType
from sow_presenter.errors import PresenterError
from sow_presenter.presenter.broadcast import topic_for
from sow_presenter.presenter.display import DisplayClient, DisplayView
from sow_presenter.presenter.editor import ScheduleEditor

app = typer.Typer(help="Schedule operations")


def _fail(error: PresenterError) -> None:
    console.print(f"[red]Error: {error}[/red]")
    raise typer.Exit(1)


def _parse_verses(verses: str) -> list[int]:
    """Parse a verse selection like "16" or "16-18" or "1,3,5-7"."""
    nums: list[int] = []
    for part in verses.split(","):
        part = part.strip()
        if not part:
            continue
        if "-" in part:
            start, end = part.split("-", 1)
            nums.extend(range(int(start), int(end) + 1))
        else:
            nums.append(int(part))
    return nums


@app.command("create")
def create_schedule(
    name: str = typer.Argument(..., help="Schedule name"),
    config_path: Path = typer.Option(None, "--config", "-c", help="Path to config file"),
) -> None:
    """Create an empty schedule."""
    editor = get_editor(load_config(config_path))
    try:
        schedule = editor.schedules.create_schedule(name)
    finally:
        close_editor(editor)

    console.print(f"[green]Created schedule {schedule.id}: {schedule.name}[/green]")


@app.command("list")
def list_schedules(
    config_path: Path = typer.Option(None, "--config", "-c", help="Path to config file"),
) -> None:
    """List schedules, most recently updated first."""
    editor = get_editor(load_config(config_path))
    try:
        schedules = editor.schedules.list_schedules()
        counts = {s.id: editor.schedules.get_entry_count(s.id) for s in schedules}
    finally:
        close_editor(editor)

    if not schedules:
        console.print("[yellow]No schedules yet. Create one with 'sow-presenter schedule create'.[/yellow]")
        return

    table = Table(title=f"Schedules ({len(schedules)})")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Entries", justify="right")
    table.add_column("Updated")

    for schedule in schedules:
        table.add_row(schedule.id, schedule.name, str(counts[schedule.id]), schedule.updated_at or "")

    console.print(table)


@app.command("rename")
def rename_schedule(
    schedule_id: str = typer.Argument(..., help="Schedule ID"),
    name: str = typer.Argument(..., help="New schedule name"),
    config_path: Path = typer.Option(None, "--config", "-c", help="Path to config file"),
) -> None:
    """Rename a schedule."""
    editor = get_editor(load_config(config_path))
    try:
        renamed = editor.schedules.rename_schedule(schedule_id, name)
    finally:
        close_editor(editor)

    if not renamed:
        console.print(f"[red]Error: Schedule not found: {schedule_id}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Renamed schedule {schedule_id} to {name}[/green]")


@app.command("show")
def show_schedule(
    schedule_id: str = typer.Argument(..., help="Schedule ID"),
    config_path: Path = typer.Option(None, "--config", "-c", help="Path to config file"),
) -> None:
    """Show the entries of a schedule in order."""
    editor = get_editor(load_config(config_path))
    try:
        schedule = editor.schedules.get_schedule(schedule_id)
        entries = editor.list_entries(schedule_id)
    except PresenterError as e:
        _fail(e)
    finally:
        close_editor(editor)

    table = Table(title=f"{schedule.name} ({len(entries)} entries)")
    table.add_column("#", justify="right")
    table.add_column("Entry ID", style="dim")
    table.add_column("Type", style="magenta")
    table.add_column("Title", style="cyan")
    table.add_column("Slides", justify="right")

    for entry in entries:
        table.add_row(
            str(entry.position),
            entry.id,
            entry.item_type.value,
            entry.title,
            str(entry.slide_count),
        )

    console.print(table)


@app.command("add")
def add_entry(
    schedule_id: str = typer.Argument(..., help="Schedule ID"),
    item_type: str = typer.Argument(..., help="song, scripture or image"),
    item_id: Optional[str] = typer.Argument(None, help="ID of existing content"),
    image_url: Optional[str] = typer.Option(None, "--url", help="Image URL (new image)"),
    name: Optional[str] = typer.Option(None, "--name", help="Image name (new image)"),
    book: Optional[str] = typer.Option(None, "--book", help="Bible book (new scripture)"),
    chapter: Optional[int] = typer.Option(None, "--chapter", help="Chapter number (new scripture)"),
    verses: Optional[str] = typer.Option(None, "--verses", help='Verses, e.g. "16" or "16-18"'),
    bible_version: Optional[str] = typer.Option(None, "--bible-version", help="Bible version"),
    config_path: Path = typer.Option(None, "--config", "-c", help="Path to config file"),
) -> None:
    """Append content to a schedule.

    Examples:
        sow-presenter schedule add <schedule> song <song_id>
        sow-presenter schedule add <schedule> image --url https://.../bg.jpg
        sow-presenter schedule add <schedule> scripture --book Juan --chapter 3 --verses 16-17
    """
    try:
        verse_nums = _parse_verses(verses) if verses else []
    except ValueError:
        console.print(f"[red]Invalid verse selection: {verses}[/red]")
        raise typer.Exit(1)

    editor = get_editor(load_config(config_path))
    try:
        if item_id is not None:
            summary = editor.add_entry(schedule_id, item_type, item_id)
        else:
            kind = ItemType.parse(item_type)
            if kind == ItemType.IMAGE and image_url:
                summary = editor.add_image(schedule_id, image_url, name)
            elif kind == ItemType.SCRIPTURE and book and chapter is not None and verse_nums:
                summary = editor.add_scripture_from_bible(
                    schedule_id, bible_version, book, chapter, verse_nums
                )
            else:
                console.print(
                    "[red]Give an item ID, or --url for an image, or "
                    "--book/--chapter/--verses for a scripture[/red]"
                )
                raise typer.Exit(1)
    except PresenterError as e:
        _fail(e)
    finally:
        close_editor(editor)

    console.print(
        f"[green]Added {summary.item_type.value} '{summary.title}' as entry {summary.id} "
        f"at position {summary.position} ({summary.slide_count} slides)[/green]"
    )


@app.command("remove")
def remove_entry(
    schedule_id: str = typer.Argument(..., help="Schedule ID"),
    entry_id: str = typer.Argument(..., help="Entry ID"),
    config_path: Path = typer.Option(None, "--config", "-c", help="Path to config file"),
) -> None:
    """Remove an entry from a schedule."""
    editor = get_editor(load_config(config_path))
    try:
        editor.remove_entry(schedule_id, entry_id)
    except PresenterError as e:
        _fail(e)
    finally:
        close_editor(editor)

    console.print(f"[green]Removed entry {entry_id}[/green]")


@app.command("reorder")
def reorder_entries(
    schedule_id: str = typer.Argument(..., help="Schedule ID"),
    entry_ids: List[str] = typer.Argument(..., help="Entry IDs in their new order"),
    config_path: Path = typer.Option(None, "--config", "-c", help="Path to config file"),
) -> None:
    """Reorder entries. Entries not listed keep their relative order after the listed ones."""
    editor = get_editor(load_config(config_path))
    try:
        entries = editor.reorder(schedule_id, entry_ids)
    except PresenterError as e:
        _fail(e)
    finally:
        close_editor(editor)

    console.print(f"[green]Reordered {len(entries)} entries[/green]")
    for entry in entries:
        console.print(f"  {entry.position}. {entry.id} ({entry.item_type.value})")


def _render(view: DisplayView, label: str) -> Panel:
    if view.kind == "image":
        body = f"[magenta]image[/magenta] {view.image_url}"
    elif view.kind == "blank":
        body = "[dim](blank)[/dim]"
    else:
        body = view.text or ""
    style = "green" if view.kind == "title" else "cyan"
    return Panel(body, title=label, border_style=style)


async def _preview(editor: ScheduleEditor, schedule_id: str, entry_id: str) -> list[Panel]:
    """Present an entry to a local display and step through its slides."""
    display = DisplayClient(editor.store.max_lines_per_slide)
    panels: list[Panel] = []

    with editor.store.channel.subscribe(topic_for(schedule_id)) as subscription:
        await editor.present_entry(schedule_id, entry_id)
        display.apply(subscription.get_nowait())
        panels.append(_render(display.view, "Title"))

        for index in range(len(display.verse_slides)):
            await editor.navigate(schedule_id, index)
            display.apply(subscription.get_nowait())
            panels.append(_render(display.view, f"Slide {index + 1}/{len(display.verse_slides)}"))

    return panels


@app.command("preview")
def preview_entry(
    schedule_id: str = typer.Argument(..., help="Schedule ID"),
    entry_id: str = typer.Argument(..., help="Entry ID"),
    config_path: Path = typer.Option(None, "--config", "-c", help="Path to config file"),
) -> None:
    """Show every slide an entry produces on a display."""
    editor = get_editor(load_config(config_path))
    try:
        panels = asyncio.run(_preview(editor, schedule_id, entry_id))
    except PresenterError as e:
        _fail(e)
    finally:
        close_editor(editor)

    for panel in panels:
        console.print(panel)
