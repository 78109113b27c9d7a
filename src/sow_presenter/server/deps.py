"""FastAPI dependencies resolving the services created at startup."""

from fastapi import Request

from sow_presenter.bible.loader import BibleLoader
from sow_presenter.db.catalog_client import CatalogClient
from sow_presenter.presenter.broadcast import InMemoryBroadcastChannel
from sow_presenter.presenter.editor import ScheduleEditor


def get_editor(request: Request) -> ScheduleEditor:
    return request.app.state.editor


def get_catalog(request: Request) -> CatalogClient:
    return request.app.state.editor.catalog


def get_channel(request: Request) -> InMemoryBroadcastChannel:
    return request.app.state.channel


def get_bible(request: Request) -> BibleLoader:
    return request.app.state.editor.bible
