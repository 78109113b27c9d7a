"""Read-write database client for schedule tables.

Provides CRUD operations for schedules and schedule_entries, plus creation
of the scriptures and images that are owned by a schedule entry.

Entry positions stay dense (0..n-1): appends use the current entry count,
removals shift later entries down and reorders rewrite every position of the
schedule in a single transaction.
"""

import sqlite3
from datetime import datetime
from typing import Optional

from sow_presenter.db.connection import SQLiteClient
from sow_presenter.db.models import (
    ItemType,
    Schedule,
    ScheduleEntry,
    ScheduleImage,
    Scripture,
)
from sow_presenter.errors import NotFoundError, ValidationError

# Table holding the content for each item type
ITEM_TABLES = {
    ItemType.SONG: "songs",
    ItemType.SCRIPTURE: "scriptures",
    ItemType.IMAGE: "schedule_images",
}


class ScheduleClient(SQLiteClient):
    """Client for schedule and schedule entry operations."""

    # Schedule operations

    def create_schedule(self, name: str) -> Schedule:
        """Create a new schedule.

        Args:
            name: Display name for the schedule

        Returns:
            Created Schedule instance
        """
        now = datetime.now().isoformat()
        schedule = Schedule(
            id=Schedule.generate_id(),
            name=name,
            created_at=now,
            updated_at=now,
        )

        with self.transaction() as conn:
            conn.execute(
                "INSERT INTO schedules (id, name, created_at, updated_at) VALUES (?, ?, ?, ?)",
                (schedule.id, schedule.name, schedule.created_at, schedule.updated_at),
            )

        return schedule

    def get_schedule(self, schedule_id: str) -> Optional[Schedule]:
        """Get a schedule by ID.

        Args:
            schedule_id: The schedule ID

        Returns:
            Schedule or None if not found
        """
        cursor = self.connection.cursor()
        cursor.execute("SELECT * FROM schedules WHERE id = ?", (schedule_id,))
        row = cursor.fetchone()

        if row:
            return Schedule.from_row(tuple(row))
        return None

    def list_schedules(self, limit: Optional[int] = None) -> list[Schedule]:
        """List all schedules.

        Args:
            limit: Maximum number of results

        Returns:
            List of schedules ordered by updated_at desc
        """
        cursor = self.connection.cursor()

        query = "SELECT * FROM schedules ORDER BY updated_at DESC"
        params: list = []

        if limit:
            query += " LIMIT ?"
            params.append(limit)

        cursor.execute(query, params)
        return [Schedule.from_row(tuple(row)) for row in cursor.fetchall()]

    def rename_schedule(self, schedule_id: str, name: str) -> bool:
        """Rename a schedule.

        Args:
            schedule_id: The schedule ID
            name: New name

        Returns:
            True if updated, False if not found
        """
        with self.transaction() as conn:
            cursor = conn.cursor()
            cursor.execute("UPDATE schedules SET name = ? WHERE id = ?", (name, schedule_id))
            return cursor.rowcount > 0

    def delete_schedule(self, schedule_id: str) -> bool:
        """Delete a schedule, its entries and the content they own.

        Entries are removed first so owned scriptures are deleted by the
        entry trigger; images go with the schedule via ON DELETE CASCADE.

        Args:
            schedule_id: The schedule ID

        Returns:
            True if deleted, False if not found
        """
        with self.transaction() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM schedule_entries WHERE schedule_id = ?", (schedule_id,))
            cursor.execute("DELETE FROM schedules WHERE id = ?", (schedule_id,))
            return cursor.rowcount > 0

    # Entry operations

    def add_entry(self, schedule_id: str, item_type: ItemType, item_id: str) -> ScheduleEntry:
        """Append an entry referencing existing content.

        A scripture belongs to exactly one entry, so adding an existing
        scripture appends an entry that owns a fresh copy of it.

        Args:
            schedule_id: The schedule ID
            item_type: Kind of content
            item_id: ID of the content

        Returns:
            Created ScheduleEntry

        Raises:
            NotFoundError: If the schedule does not exist
            ValidationError: If the content does not exist or is an image
                belonging to another schedule
        """
        with self.transaction() as conn:
            cursor = conn.cursor()
            self._require_schedule(cursor, schedule_id)
            self._require_content(cursor, schedule_id, item_type, item_id)
            if item_type == ItemType.SCRIPTURE:
                item_id = self._copy_scripture(cursor, item_id)
            return self._append_entry(cursor, schedule_id, item_type, item_id)

    def add_scripture_entry(
        self,
        schedule_id: str,
        book_id: str,
        chapter_num: int,
        verse_from: Optional[int],
        verse_to: Optional[int],
        bible_version: Optional[str],
        content: str,
    ) -> tuple[Scripture, ScheduleEntry]:
        """Create a scripture owned by a new entry appended to the schedule.

        Args:
            schedule_id: The schedule ID
            book_id: Book title
            chapter_num: Chapter number
            verse_from: First verse number
            verse_to: Last verse number (None for a single verse)
            bible_version: Bible version code
            content: Passage text

        Returns:
            Tuple of (created Scripture, created ScheduleEntry)

        Raises:
            NotFoundError: If the schedule does not exist
        """
        scripture = Scripture(
            id=Scripture.generate_id(),
            book_id=book_id,
            chapter_num=chapter_num,
            verse_from=verse_from,
            verse_to=verse_to,
            bible_version=bible_version,
            content=content,
            created_at=datetime.now().isoformat(),
        )

        with self.transaction() as conn:
            cursor = conn.cursor()
            self._require_schedule(cursor, schedule_id)
            cursor.execute(
                """
                INSERT INTO scriptures
                (id, book_id, chapter_num, verse_from, verse_to, bible_version, content, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    scripture.id,
                    scripture.book_id,
                    scripture.chapter_num,
                    scripture.verse_from,
                    scripture.verse_to,
                    scripture.bible_version,
                    scripture.content,
                    scripture.created_at,
                ),
            )
            entry = self._append_entry(cursor, schedule_id, ItemType.SCRIPTURE, scripture.id)

        return scripture, entry

    def add_image_entry(
        self, schedule_id: str, image_url: str, name: Optional[str] = None
    ) -> tuple[ScheduleImage, ScheduleEntry]:
        """Register an image for the schedule and append an entry for it.

        Args:
            schedule_id: The schedule ID
            image_url: URL the display loads
            name: Optional display name

        Returns:
            Tuple of (created ScheduleImage, created ScheduleEntry)

        Raises:
            NotFoundError: If the schedule does not exist
            ValidationError: If image_url is empty
        """
        if not image_url or not image_url.strip():
            raise ValidationError("image_url is required")

        image = ScheduleImage(
            id=ScheduleImage.generate_id(),
            schedule_id=schedule_id,
            image_url=image_url.strip(),
            name=name,
            created_at=datetime.now().isoformat(),
        )

        with self.transaction() as conn:
            cursor = conn.cursor()
            self._require_schedule(cursor, schedule_id)
            cursor.execute(
                """
                INSERT INTO schedule_images (id, schedule_id, name, image_url, created_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (image.id, image.schedule_id, image.name, image.image_url, image.created_at),
            )
            entry = self._append_entry(cursor, schedule_id, ItemType.IMAGE, image.id)

        return image, entry

    def get_entry(self, entry_id: str) -> Optional[ScheduleEntry]:
        """Get an entry by ID.

        Args:
            entry_id: The entry ID

        Returns:
            ScheduleEntry or None if not found
        """
        cursor = self.connection.cursor()
        cursor.execute("SELECT * FROM schedule_entries WHERE id = ?", (entry_id,))
        row = cursor.fetchone()

        if row:
            return ScheduleEntry.from_row(tuple(row))
        return None

    def get_entries(self, schedule_id: str) -> list[ScheduleEntry]:
        """Get all entries in a schedule.

        Args:
            schedule_id: The schedule ID

        Returns:
            List of ScheduleEntry ordered by position
        """
        cursor = self.connection.cursor()
        cursor.execute(
            "SELECT * FROM schedule_entries WHERE schedule_id = ? ORDER BY position",
            (schedule_id,),
        )
        return [ScheduleEntry.from_row(tuple(row)) for row in cursor.fetchall()]

    def get_entry_count(self, schedule_id: str) -> int:
        """Get the number of entries in a schedule.

        Args:
            schedule_id: The schedule ID

        Returns:
            Entry count
        """
        cursor = self.connection.cursor()
        cursor.execute(
            "SELECT COUNT(*) FROM schedule_entries WHERE schedule_id = ?",
            (schedule_id,),
        )
        result = cursor.fetchone()
        return result[0] if result else 0

    def remove_entry(self, entry_id: str) -> bool:
        """Remove an entry from its schedule.

        A scripture referenced by the entry is deleted with it; songs and
        images are left in place.

        Args:
            entry_id: The entry ID

        Returns:
            True if removed, False if not found
        """
        with self.transaction() as conn:
            cursor = conn.cursor()

            # Get schedule_id and position for renumbering
            cursor.execute(
                "SELECT schedule_id, position FROM schedule_entries WHERE id = ?",
                (entry_id,),
            )
            row = cursor.fetchone()

            if not row:
                return False

            schedule_id, position = row

            cursor.execute("DELETE FROM schedule_entries WHERE id = ?", (entry_id,))

            # Close the gap left by the removed entry
            cursor.execute(
                """
                UPDATE schedule_entries
                SET position = position - 1
                WHERE schedule_id = ? AND position > ?
                """,
                (schedule_id, position),
            )

            self._touch_schedule(cursor, schedule_id)
            return True

    def reorder_entries(self, schedule_id: str, ordered_entry_ids: list[str]) -> list[ScheduleEntry]:
        """Rewrite entry positions from an ordered list of entry IDs.

        Named entries take positions 0..k-1 in the given order. Entries not
        named (partial reorder) follow in their previous relative order.
        Either every position is rewritten or none is.

        Args:
            schedule_id: The schedule ID
            ordered_entry_ids: Entry IDs in their new order

        Returns:
            Entries of the schedule in their new order

        Raises:
            NotFoundError: If the schedule does not exist
            ValidationError: If the list is empty, has duplicates, or names
                an entry outside the schedule
        """
        if not ordered_entry_ids:
            raise ValidationError("order must list at least one entry")

        if len(set(ordered_entry_ids)) != len(ordered_entry_ids):
            raise ValidationError("order contains duplicate entry ids")

        with self.transaction() as conn:
            cursor = conn.cursor()
            self._require_schedule(cursor, schedule_id)

            cursor.execute(
                "SELECT id FROM schedule_entries WHERE schedule_id = ? ORDER BY position",
                (schedule_id,),
            )
            current_ids = [row[0] for row in cursor.fetchall()]

            unknown = [entry_id for entry_id in ordered_entry_ids if entry_id not in current_ids]
            if unknown:
                raise ValidationError(
                    f"Entries not in schedule {schedule_id}: {', '.join(unknown)}"
                )

            named = set(ordered_entry_ids)
            new_order = list(ordered_entry_ids) + [i for i in current_ids if i not in named]

            cursor.executemany(
                "UPDATE schedule_entries SET position = ? WHERE id = ?",
                [(position, entry_id) for position, entry_id in enumerate(new_order)],
            )

            self._touch_schedule(cursor, schedule_id)

        return self.get_entries(schedule_id)

    # Helpers

    def _require_schedule(self, cursor: sqlite3.Cursor, schedule_id: str) -> None:
        cursor.execute("SELECT 1 FROM schedules WHERE id = ?", (schedule_id,))
        if cursor.fetchone() is None:
            raise NotFoundError(f"Schedule not found: {schedule_id}")

    def _require_content(
        self, cursor: sqlite3.Cursor, schedule_id: str, item_type: ItemType, item_id: str
    ) -> None:
        if not item_id:
            raise ValidationError("item_id is required")

        if item_type == ItemType.IMAGE:
            cursor.execute("SELECT schedule_id FROM schedule_images WHERE id = ?", (item_id,))
            row = cursor.fetchone()
            if row is None:
                raise ValidationError(f"image not found: {item_id}")
            if row[0] != schedule_id:
                raise ValidationError(f"image {item_id} belongs to another schedule")
            return

        cursor.execute(f"SELECT 1 FROM {ITEM_TABLES[item_type]} WHERE id = ?", (item_id,))
        if cursor.fetchone() is None:
            raise ValidationError(f"{item_type.value} not found: {item_id}")

    def _copy_scripture(self, cursor: sqlite3.Cursor, scripture_id: str) -> str:
        copy_id = Scripture.generate_id()
        cursor.execute(
            """
            INSERT INTO scriptures
            (id, book_id, chapter_num, verse_from, verse_to, bible_version, content, created_at)
            SELECT ?, book_id, chapter_num, verse_from, verse_to, bible_version, content, ?
            FROM scriptures WHERE id = ?
            """,
            (copy_id, datetime.now().isoformat(), scripture_id),
        )
        return copy_id

    def _append_entry(
        self, cursor: sqlite3.Cursor, schedule_id: str, item_type: ItemType, item_id: str
    ) -> ScheduleEntry:
        cursor.execute(
            "SELECT COUNT(*) FROM schedule_entries WHERE schedule_id = ?",
            (schedule_id,),
        )
        position = cursor.fetchone()[0]

        entry = ScheduleEntry(
            id=ScheduleEntry.generate_id(),
            schedule_id=schedule_id,
            item_type=item_type,
            item_id=item_id,
            position=position,
            created_at=datetime.now().isoformat(),
        )

        cursor.execute(
            """
            INSERT INTO schedule_entries (id, schedule_id, item_type, item_id, position, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                entry.id,
                entry.schedule_id,
                entry.item_type.value,
                entry.item_id,
                entry.position,
                entry.created_at,
            ),
        )

        self._touch_schedule(cursor, schedule_id)
        return entry

    def _touch_schedule(self, cursor: sqlite3.Cursor, schedule_id: str) -> None:
        cursor.execute(
            "UPDATE schedules SET updated_at = datetime('now') WHERE id = ?",
            (schedule_id,),
        )
