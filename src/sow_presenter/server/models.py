"""Pydantic models for API requests."""

from typing import List, Optional

from pydantic import BaseModel, Field


class CreateScheduleRequest(BaseModel):
    """Request to create a schedule."""

    name: str = Field(min_length=1)


class RenameScheduleRequest(BaseModel):
    """Request to rename a schedule."""

    name: str = Field(min_length=1)


class AddEntryRequest(BaseModel):
    """Request to append existing content to a schedule."""

    item_type: str
    item_id: str


class AddScriptureRequest(BaseModel):
    """Request to build a scripture from bible verses and append it."""

    bible_version: Optional[str] = None
    book: str
    chapter: int
    verse_nums: List[int] = Field(min_length=1)


class AddImageRequest(BaseModel):
    """Request to register an image and append it."""

    image_url: str
    name: Optional[str] = None


class ReorderRequest(BaseModel):
    """Entry IDs in their new order (full or partial)."""

    order: List[str]


class PresentRequest(BaseModel):
    """Request to present an entry."""

    entry_id: str


class NavigateRequest(BaseModel):
    """Request to show a slide (0-based chunk index)."""

    slide_index: int


class CreateSongRequest(BaseModel):
    """Request to add a song to the catalog."""

    title: str = Field(min_length=1)
    content: Optional[str] = None
