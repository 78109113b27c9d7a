"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from sow_presenter import __version__
from sow_presenter.bible.loader import BibleLoader
from sow_presenter.config import PresenterConfig
from sow_presenter.db.catalog_client import CatalogClient
from sow_presenter.db.schedule_client import ScheduleClient
from sow_presenter.errors import PresenterError
from sow_presenter.logging_config import get_logger, setup_logging
from sow_presenter.presenter.broadcast import InMemoryBroadcastChannel
from sow_presenter.presenter.editor import ScheduleEditor
from sow_presenter.presenter.state import PresentationStateStore
from sow_presenter.server.config import load_presenter_config, settings
from sow_presenter.server.routes import catalog, health, presenter, schedules

logger = get_logger(__name__)


def create_app(config: Optional[PresenterConfig] = None, console_logging: bool = False) -> FastAPI:
    """Build the presenter service.

    Args:
        config: Presenter config (defaults to the TOML config with env overrides)
        console_logging: Also log to stderr

    Returns:
        FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Create the clients, channel and state store for the app's lifetime.

        Args:
            app: FastAPI application

        Yields:
            None
        """
        effective = config or load_presenter_config(settings)
        effective.ensure_directories()

        level = logging.getLevelName(settings.SOW_PRESENTER_LOG_LEVEL.upper())
        setup_logging(
            effective.log_dir,
            level=level if isinstance(level, int) else logging.INFO,
            console=console_logging,
        )

        # Startup
        schedule_client = ScheduleClient(effective.db_path)
        schedule_client.initialize_schema()
        catalog_client = CatalogClient(effective.db_path)

        channel = InMemoryBroadcastChannel(max_queue_size=effective.subscriber_queue_size)
        store = PresentationStateStore(channel, max_lines_per_slide=effective.max_lines_per_slide)
        bible = BibleLoader(effective.bible_dir, default_version=effective.default_bible_version)

        app.state.config = effective
        app.state.channel = channel
        app.state.editor = ScheduleEditor(schedule_client, catalog_client, store, bible=bible)

        logger.info(f"Presenter service started (db: {effective.db_path})")

        yield

        # Shutdown
        for topic in channel.topics():
            logger.info(f"Closing {channel.subscriber_count(topic)} display(s) on {topic}")
        schedule_client.close()
        catalog_client.close()
        logger.info("Presenter service stopped")

    app = FastAPI(
        title="Stream of Worship Presenter",
        version=__version__,
        lifespan=lifespan,
    )

    @app.exception_handler(PresenterError)
    async def presenter_error_handler(request: Request, exc: PresenterError) -> JSONResponse:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc}")
        return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})

    app.include_router(health.router, prefix="/api/v1")
    app.include_router(schedules.router, prefix="/api/v1")
    app.include_router(presenter.router, prefix="/api/v1")
    app.include_router(catalog.router, prefix="/api/v1")

    @app.get("/")
    async def root() -> dict:
        """Root endpoint.

        Returns:
            Service info
        """
        return {
            "message": "Stream of Worship Presenter",
            "version": __version__,
        }

    return app


app = create_app()


def main() -> None:
    """Entry point for running the service directly."""
    import uvicorn

    config = load_presenter_config(settings)
    uvicorn.run(
        create_app(config, console_logging=True),
        host=config.host,
        port=config.port,
        reload=False,
    )


if __name__ == "__main__":
    main()
