"""Data models for presenter database entities.

Provides dataclasses for schedules, schedule entries and the content they
reference (songs, scriptures, schedule images), with serialization to/from
database rows.
"""

import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from sow_presenter.errors import ValidationError


def _new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


class ItemType(str, Enum):
    """Kinds of content a schedule entry can reference."""

    SONG = "song"
    SCRIPTURE = "scripture"
    IMAGE = "image"

    @classmethod
    def parse(cls, value: Optional[str]) -> "ItemType":
        """Parse an item type, case-insensitively.

        Accepts "song", "Song", "SCRIPTURE" etc.

        Args:
            value: Raw item type string

        Returns:
            Matching ItemType

        Raises:
            ValidationError: If value is empty or unknown
        """
        if not value or not value.strip():
            raise ValidationError("item_type is required")
        try:
            return cls(value.strip().lower())
        except ValueError:
            valid = ", ".join(t.value for t in cls)
            raise ValidationError(f"Unknown item_type '{value}' (expected one of: {valid})")


@dataclass
class Schedule:
    """A service schedule (ordered list of entries).

    Attributes:
        id: Unique schedule ID (e.g., "schedule_1a2b3c4d5e6f")
        name: Display name for the schedule
        created_at: ISO timestamp when created
        updated_at: ISO timestamp when last updated
    """

    id: str
    name: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: tuple) -> "Schedule":
        """Create a Schedule from a database row tuple."""
        return cls(
            id=row[0],
            name=row[1],
            created_at=row[2],
            updated_at=row[3],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def generate_id(cls) -> str:
        return _new_id("schedule")


@dataclass
class ScheduleEntry:
    """A positioned reference from a schedule to one content item.

    Attributes:
        id: Unique entry ID
        schedule_id: Reference to schedules.id
        item_type: Kind of referenced content
        item_id: ID in the table for item_type
        position: Ordering key, unique within the schedule (0-indexed)
        created_at: ISO timestamp when created
    """

    id: str
    schedule_id: str
    item_type: ItemType
    item_id: str
    position: int
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: tuple) -> "ScheduleEntry":
        """Create a ScheduleEntry from a database row tuple.

        Args:
            row: Database row tuple with columns in schema order

        Returns:
            ScheduleEntry instance
        """
        return cls(
            id=row[0],
            schedule_id=row[1],
            item_type=ItemType(row[2]),
            item_id=row[3],
            position=row[4],
            created_at=row[5],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "schedule_id": self.schedule_id,
            "item_type": self.item_type.value,
            "item_id": self.item_id,
            "position": self.position,
            "created_at": self.created_at,
        }

    @classmethod
    def generate_id(cls) -> str:
        return _new_id("entry")


@dataclass
class Song:
    """A song with plain-text lyrics.

    Attributes:
        id: Unique song ID
        title: Song title
        content: Lyrics, paragraphs separated by blank lines
        created_at: ISO timestamp when created
    """

    id: str
    title: str
    content: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: tuple) -> "Song":
        return cls(id=row[0], title=row[1], content=row[2], created_at=row[3])

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "created_at": self.created_at,
        }

    @classmethod
    def generate_id(cls) -> str:
        return _new_id("song")


@dataclass
class Scripture:
    """A bible passage backing one schedule entry.

    Attributes:
        id: Unique scripture ID
        book_id: Book title as it appears in the bible file
        chapter_num: Chapter number
        verse_from: First verse number
        verse_to: Last verse number (None for a single verse)
        bible_version: Bible version code (e.g., "NVI")
        content: One "N. text" line per verse
        created_at: ISO timestamp when created
    """

    id: str
    book_id: str
    chapter_num: int
    verse_from: Optional[int] = None
    verse_to: Optional[int] = None
    bible_version: Optional[str] = None
    content: Optional[str] = None
    created_at: Optional[str] = None

    DEFAULT_VERSION = "NVI"

    @classmethod
    def from_row(cls, row: tuple) -> "Scripture":
        return cls(
            id=row[0],
            book_id=row[1],
            chapter_num=row[2],
            verse_from=row[3],
            verse_to=row[4],
            bible_version=row[5],
            content=row[6],
            created_at=row[7],
        )

    @property
    def version(self) -> str:
        return self.bible_version or self.DEFAULT_VERSION

    @property
    def bible_reference(self) -> str:
        """Human readable reference, e.g. "Juan 3:16-18 NVI"."""
        reference = f"{self.book_id} {self.chapter_num}"
        if self.verse_from is not None:
            reference += f":{self.verse_from}"
            if self.verse_to is not None and self.verse_to != self.verse_from:
                reference += f"-{self.verse_to}"
        return f"{reference} {self.version}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "book_id": self.book_id,
            "chapter_num": self.chapter_num,
            "verse_from": self.verse_from,
            "verse_to": self.verse_to,
            "bible_version": self.version,
            "bible_reference": self.bible_reference,
            "content": self.content,
            "created_at": self.created_at,
        }

    @classmethod
    def generate_id(cls) -> str:
        return _new_id("scripture")


@dataclass
class ScheduleImage:
    """An image shown as a single slide.

    Attributes:
        id: Unique image ID
        schedule_id: Schedule the image was uploaded for
        name: Optional display name
        image_url: URL the display loads the image from
        created_at: ISO timestamp when created
    """

    id: str
    schedule_id: str
    image_url: str
    name: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: tuple) -> "ScheduleImage":
        return cls(
            id=row[0],
            schedule_id=row[1],
            name=row[2],
            image_url=row[3],
            created_at=row[4],
        )

    @property
    def title(self) -> str:
        return self.name or f"Image #{self.id}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "schedule_id": self.schedule_id,
            "name": self.name,
            "title": self.title,
            "image_url": self.image_url,
            "created_at": self.created_at,
        }

    @classmethod
    def generate_id(cls) -> str:
        return _new_id("image")
