"""Catalog endpoints: songs, scriptures and the bible browser."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from sow_presenter.bible.loader import BIBLE_VERSIONS, BibleLoader
from sow_presenter.db.catalog_client import CatalogClient
from sow_presenter.errors import InvalidStateError, NotFoundError
from sow_presenter.server.deps import get_bible, get_catalog
from sow_presenter.server.models import CreateSongRequest

router = APIRouter(tags=["catalog"])


def _require_bible(bible: Optional[BibleLoader]) -> BibleLoader:
    if bible is None:
        raise InvalidStateError("Bible lookup is not configured")
    return bible


# Songs


@router.post("/songs", status_code=201)
async def create_song(
    request: CreateSongRequest,
    catalog: CatalogClient = Depends(get_catalog),
) -> dict:
    """Add a song to the catalog."""
    return catalog.create_song(request.title, request.content).to_dict()


@router.get("/songs")
async def search_songs(
    q: str = "",
    limit: int = Query(default=20, ge=1, le=200),
    catalog: CatalogClient = Depends(get_catalog),
) -> list[dict]:
    """Search songs by title."""
    return [song.to_dict() for song in catalog.search_songs(q, limit=limit)]


@router.get("/songs/{song_id}")
async def get_song(song_id: str, catalog: CatalogClient = Depends(get_catalog)) -> dict:
    """Get a song by ID."""
    song = catalog.get_song(song_id)
    if song is None:
        raise NotFoundError(f"Song not found: {song_id}")
    return song.to_dict()


@router.delete("/songs/{song_id}")
async def delete_song(song_id: str, catalog: CatalogClient = Depends(get_catalog)) -> dict:
    """Delete a song that no schedule uses."""
    if not catalog.delete_song(song_id):
        raise NotFoundError(f"Song not found: {song_id}")
    return {"success": True}


# Scriptures


@router.get("/scriptures")
async def search_scriptures(
    q: str = "",
    limit: int = Query(default=20, ge=1, le=200),
    catalog: CatalogClient = Depends(get_catalog),
) -> list[dict]:
    """Search scriptures by book or text."""
    return [scripture.to_dict() for scripture in catalog.search_scriptures(q, limit=limit)]


# Bible browser


@router.get("/bible/versions")
async def bible_versions(bible: Optional[BibleLoader] = Depends(get_bible)) -> dict:
    """Versions offered when creating a scripture."""
    loader = _require_bible(bible)
    return {"versions": BIBLE_VERSIONS, "default": loader.default_version}


@router.get("/bible/books")
async def bible_books(
    bible_version: Optional[str] = None,
    bible: Optional[BibleLoader] = Depends(get_bible),
) -> list[dict]:
    """Books of a bible version with their chapter counts."""
    books = _require_bible(bible).books(bible_version)
    return [{"title": book.title, "chapters": len(book.chapters)} for book in books]


@router.get("/bible/chapters")
async def bible_chapters(
    book_id: str,
    bible_version: Optional[str] = None,
    bible: Optional[BibleLoader] = Depends(get_bible),
) -> list[int]:
    """Chapter numbers of a book."""
    book = _require_bible(bible).get_book(bible_version, book_id)
    return [chapter.num for chapter in book.chapters]


@router.get("/bible/verses")
async def bible_verses(
    book_id: str,
    chapter_num: int,
    bible_version: Optional[str] = None,
    bible: Optional[BibleLoader] = Depends(get_bible),
) -> list[dict]:
    """Verses of a chapter."""
    chapter = _require_bible(bible).get_chapter(bible_version, book_id, chapter_num)
    return [verse.to_dict() for verse in chapter.verses]
