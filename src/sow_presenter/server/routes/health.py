"""Health check endpoint."""

from fastapi import APIRouter, Depends, Request

from sow_presenter import __version__
from sow_presenter.logging_config import get_logger
from sow_presenter.presenter.broadcast import InMemoryBroadcastChannel
from sow_presenter.server.deps import get_channel

logger = get_logger(__name__)
router = APIRouter()


def check_database(request: Request) -> dict:
    """Check that the database answers queries.

    Returns:
        Status dictionary with table row counts
    """
    schedules = request.app.state.editor.schedules
    try:
        return {"status": "healthy", "path": str(schedules.db_path), "tables": schedules.get_table_counts()}
    except Exception as e:
        logger.warning(f"Database health check failed: {e}")
        return {"status": "unhealthy", "error": str(e)}


def check_bible(request: Request) -> dict:
    """Check whether bible lookup is configured.

    Returns:
        Status dictionary
    """
    bible = request.app.state.editor.bible
    if bible is None:
        return {"status": "not_configured"}
    if not bible.bible_dir.is_dir():
        return {"status": "missing_directory", "path": str(bible.bible_dir)}
    return {"status": "configured", "path": str(bible.bible_dir), "default_version": bible.default_version}


@router.get("/health")
async def health_check(
    request: Request,
    channel: InMemoryBroadcastChannel = Depends(get_channel),
) -> dict:
    """Health check endpoint.

    Returns:
        Service health status
    """
    return {
        "status": "healthy",
        "version": __version__,
        "services": {
            "database": check_database(request),
            "bible": check_bible(request),
            "displays": {topic: channel.subscriber_count(topic) for topic in channel.topics()},
        },
    }
