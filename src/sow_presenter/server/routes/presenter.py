"""Presentation command endpoints and the display WebSocket."""

import asyncio
from contextlib import suppress

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from starlette.websockets import WebSocketState

from sow_presenter.logging_config import get_logger
from sow_presenter.presenter.broadcast import topic_for
from sow_presenter.presenter.editor import ScheduleEditor
from sow_presenter.server.deps import get_editor
from sow_presenter.server.models import NavigateRequest, PresentRequest

logger = get_logger(__name__)
router = APIRouter(prefix="/schedules/{schedule_id}/presenter", tags=["presenter"])

# Close code sent to displays that connect to an unknown schedule
WS_CLOSE_NOT_FOUND = 4404

# Close code sent when the service stops streaming
WS_CLOSE_NORMAL = 1000

# Close code sent when payloads can no longer be delivered to a display
WS_CLOSE_SEND_FAILED = 1011


@router.post("/present")
async def present_entry(
    schedule_id: str,
    request: PresentRequest,
    editor: ScheduleEditor = Depends(get_editor),
) -> dict:
    """Present an entry on every display.

    Returns:
        The payload that was broadcast
    """
    return await editor.present_entry(schedule_id, request.entry_id)


@router.post("/navigate")
async def navigate(
    schedule_id: str,
    request: NavigateRequest,
    editor: ScheduleEditor = Depends(get_editor),
) -> dict:
    """Show a slide of the presented entry.

    Returns:
        The payload that was broadcast
    """
    return await editor.navigate(schedule_id, request.slide_index)


@router.post("/next")
async def next_slide(schedule_id: str, editor: ScheduleEditor = Depends(get_editor)) -> dict:
    """Step to the next slide of the presented entry.

    Returns:
        Whether the slide changed, and the payload that was broadcast
    """
    payload = await editor.next_slide(schedule_id)
    return {"moved": payload is not None, "payload": payload}


@router.post("/previous")
async def previous_slide(schedule_id: str, editor: ScheduleEditor = Depends(get_editor)) -> dict:
    """Step to the previous slide of the presented entry."""
    payload = await editor.previous_slide(schedule_id)
    return {"moved": payload is not None, "payload": payload}


@router.post("/black")
async def black_screen(schedule_id: str, editor: ScheduleEditor = Depends(get_editor)) -> dict:
    """Blank every display.

    Returns:
        The payload that was broadcast
    """
    return await editor.black_screen(schedule_id)


@router.get("/state")
async def presenter_state(schedule_id: str, editor: ScheduleEditor = Depends(get_editor)) -> dict:
    """Current presentation state, for displays that (re)connect."""
    return editor.current_state(schedule_id).to_dict()


@router.websocket("/ws")
async def display_socket(websocket: WebSocket, schedule_id: str) -> None:
    """Stream presenter payloads to one display.

    Payloads published before the display connected are not replayed; a
    display catches up through GET /state. The socket is closed as soon as
    either the display disconnects or a payload can no longer be sent.
    """
    editor: ScheduleEditor = websocket.app.state.editor

    if editor.schedules.get_schedule(schedule_id) is None:
        await websocket.close(code=WS_CLOSE_NOT_FOUND)
        return

    # Subscribe before accepting so no command slips in between
    with websocket.app.state.channel.subscribe(topic_for(schedule_id)) as subscription:

        async def forward() -> int:
            try:
                async for payload in subscription:
                    await websocket.send_json(payload)
            except (WebSocketDisconnect, RuntimeError) as e:
                logger.warning(f"Display on schedule {schedule_id} stopped receiving: {e!r}")
                return WS_CLOSE_SEND_FAILED
            # Channel closed (service shutting down)
            return WS_CLOSE_NORMAL

        async def listen() -> None:
            # Displays only listen; anything they send is ignored
            with suppress(WebSocketDisconnect):
                while True:
                    await websocket.receive_text()

        await websocket.accept()
        sender = asyncio.create_task(forward())
        receiver = asyncio.create_task(listen())

        try:
            done, _ = await asyncio.wait({sender, receiver}, return_when=asyncio.FIRST_COMPLETED)
            for task in done:
                task.result()
        finally:
            for task in (sender, receiver):
                task.cancel()
            await asyncio.gather(sender, receiver, return_exceptions=True)

    if sender in done and websocket.application_state == WebSocketState.CONNECTED:
        await websocket.close(code=sender.result())

    logger.info(f"Display disconnected from schedule {schedule_id}")
