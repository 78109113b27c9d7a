"""Config and client helpers shared by the CLI command groups."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from sow_presenter.bible.loader import BibleLoader
from sow_presenter.config import PresenterConfig, ensure_config_exists
from sow_presenter.db.catalog_client import CatalogClient
from sow_presenter.db.schedule_client import ScheduleClient
from sow_presenter.presenter.broadcast import InMemoryBroadcastChannel
from sow_presenter.presenter.editor import ScheduleEditor
from sow_presenter.presenter.state import PresentationStateStore

console = Console()


def load_config(config_path: Optional[Path] = None) -> PresenterConfig:
    """Load the config, creating the default file when it is missing.

    Args:
        config_path: Explicit config file (must exist)

    Returns:
        PresenterConfig instance
    """
    try:
        if config_path:
            return PresenterConfig.load(config_path)
        return ensure_config_exists()
    except FileNotFoundError:
        console.print(f"[red]Config file not found: {config_path}[/red]")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]Error loading config: {e}[/red]")
        raise typer.Exit(1)


def get_editor(config: PresenterConfig) -> ScheduleEditor:
    """Build a ScheduleEditor over the configured database.

    The schema is created on first use. Callers close the editor's clients
    with close_editor().

    Args:
        config: Presenter configuration

    Returns:
        ScheduleEditor with an in-process broadcast channel
    """
    schedules = ScheduleClient(config.db_path)
    schedules.initialize_schema()
    catalog = CatalogClient(config.db_path)

    channel = InMemoryBroadcastChannel(max_queue_size=config.subscriber_queue_size)
    store = PresentationStateStore(channel, max_lines_per_slide=config.max_lines_per_slide)
    bible = BibleLoader(config.bible_dir, default_version=config.default_bible_version)
    return ScheduleEditor(schedules, catalog, store, bible=bible)


def close_editor(editor: ScheduleEditor) -> None:
    """Close the database connections of an editor."""
    editor.schedules.close()
    editor.catalog.close()
