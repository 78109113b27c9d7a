"""Schedule and schedule entry endpoints."""

from fastapi import APIRouter, Depends

from sow_presenter.errors import NotFoundError
from sow_presenter.presenter.editor import ScheduleEditor
from sow_presenter.server.deps import get_editor
from sow_presenter.server.models import (
    AddEntryRequest,
    AddImageRequest,
    AddScriptureRequest,
    CreateScheduleRequest,
    RenameScheduleRequest,
    ReorderRequest,
)

router = APIRouter(prefix="/schedules", tags=["schedules"])


@router.post("", status_code=201)
async def create_schedule(
    request: CreateScheduleRequest,
    editor: ScheduleEditor = Depends(get_editor),
) -> dict:
    """Create an empty schedule."""
    return editor.schedules.create_schedule(request.name).to_dict()


@router.get("")
async def list_schedules(editor: ScheduleEditor = Depends(get_editor)) -> list[dict]:
    """List schedules, most recently updated first."""
    return [schedule.to_dict() for schedule in editor.schedules.list_schedules()]


@router.get("/{schedule_id}")
async def get_schedule(schedule_id: str, editor: ScheduleEditor = Depends(get_editor)) -> dict:
    """Get a schedule with its entries.

    Raises:
        NotFoundError: If the schedule does not exist
    """
    schedule = editor.schedules.get_schedule(schedule_id)
    if schedule is None:
        raise NotFoundError(f"Schedule not found: {schedule_id}")

    data = schedule.to_dict()
    data["entries"] = [entry.to_dict() for entry in editor.list_entries(schedule_id)]
    return data


@router.patch("/{schedule_id}")
async def rename_schedule(
    schedule_id: str,
    request: RenameScheduleRequest,
    editor: ScheduleEditor = Depends(get_editor),
) -> dict:
    """Rename a schedule."""
    if not editor.schedules.rename_schedule(schedule_id, request.name):
        raise NotFoundError(f"Schedule not found: {schedule_id}")
    return editor.schedules.get_schedule(schedule_id).to_dict()


@router.delete("/{schedule_id}")
async def delete_schedule(schedule_id: str, editor: ScheduleEditor = Depends(get_editor)) -> dict:
    """Delete a schedule, its entries and its presentation state."""
    editor.delete_schedule(schedule_id)
    return {"success": True}


@router.get("/{schedule_id}/entries")
async def list_entries(schedule_id: str, editor: ScheduleEditor = Depends(get_editor)) -> list[dict]:
    """Entries of a schedule in position order."""
    return [entry.to_dict() for entry in editor.list_entries(schedule_id)]


@router.post("/{schedule_id}/entries", status_code=201)
async def add_entry(
    schedule_id: str,
    request: AddEntryRequest,
    editor: ScheduleEditor = Depends(get_editor),
) -> dict:
    """Append a song, scripture or image to the schedule."""
    return editor.add_entry(schedule_id, request.item_type, request.item_id).to_dict()


@router.post("/{schedule_id}/entries/scripture", status_code=201)
async def add_scripture(
    schedule_id: str,
    request: AddScriptureRequest,
    editor: ScheduleEditor = Depends(get_editor),
) -> dict:
    """Build a scripture from bible verses and append it."""
    summary = editor.add_scripture_from_bible(
        schedule_id,
        request.bible_version,
        request.book,
        request.chapter,
        request.verse_nums,
    )
    return summary.to_dict()


@router.post("/{schedule_id}/entries/image", status_code=201)
async def add_image(
    schedule_id: str,
    request: AddImageRequest,
    editor: ScheduleEditor = Depends(get_editor),
) -> dict:
    """Register an image and append it."""
    return editor.add_image(schedule_id, request.image_url, request.name).to_dict()


@router.patch("/{schedule_id}/entries/order")
async def reorder_entries(
    schedule_id: str,
    request: ReorderRequest,
    editor: ScheduleEditor = Depends(get_editor),
) -> dict:
    """Rewrite entry positions from the given order."""
    entries = editor.reorder(schedule_id, request.order)
    return {"success": True, "entries": [entry.to_dict() for entry in entries]}


@router.delete("/{schedule_id}/entries/{entry_id}")
async def remove_entry(
    schedule_id: str,
    entry_id: str,
    editor: ScheduleEditor = Depends(get_editor),
) -> dict:
    """Remove an entry from the schedule."""
    editor.remove_entry(schedule_id, entry_id)
    return {"success": True}
