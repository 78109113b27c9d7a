"""Database client for presentable content.

Provides create and lookup operations for songs, scriptures and schedule
images. The presenter core only reads this content; songs are the one kind
created here directly, scriptures and images are created together with the
schedule entry that owns them (see ScheduleClient).
"""

from datetime import datetime
from typing import Optional

from sow_presenter.db.connection import SQLiteClient
from sow_presenter.db.models import ScheduleImage, Scripture, Song
from sow_presenter.errors import ValidationError


class CatalogClient(SQLiteClient):
    """Client for the songs, scriptures and schedule_images tables."""

    # Song operations

    def create_song(self, title: str, content: Optional[str] = None) -> Song:
        """Create a new song.

        Args:
            title: Song title
            content: Lyrics text

        Returns:
            Created Song instance
        """
        song = Song(
            id=Song.generate_id(),
            title=title,
            content=content,
            created_at=datetime.now().isoformat(),
        )

        with self.transaction() as conn:
            conn.execute(
                "INSERT INTO songs (id, title, content, created_at) VALUES (?, ?, ?, ?)",
                (song.id, song.title, song.content, song.created_at),
            )

        return song

    def get_song(self, song_id: str) -> Optional[Song]:
        """Get a song by ID.

        Args:
            song_id: The song ID

        Returns:
            Song or None if not found
        """
        cursor = self.connection.cursor()
        cursor.execute("SELECT * FROM songs WHERE id = ?", (song_id,))
        row = cursor.fetchone()

        if row:
            return Song.from_row(tuple(row))
        return None

    def list_songs(self, limit: Optional[int] = None) -> list[Song]:
        """List songs ordered by title.

        Args:
            limit: Maximum number of results

        Returns:
            List of songs
        """
        cursor = self.connection.cursor()

        query = "SELECT * FROM songs ORDER BY title"
        params: list = []

        if limit:
            query += " LIMIT ?"
            params.append(limit)

        cursor.execute(query, params)
        return [Song.from_row(tuple(row)) for row in cursor.fetchall()]

    def search_songs(self, query: str, limit: int = 20) -> list[Song]:
        """Search songs by title.

        Args:
            query: Search query string (empty matches everything)
            limit: Maximum number of results

        Returns:
            List of matching songs ordered by title
        """
        cursor = self.connection.cursor()
        cursor.execute(
            "SELECT * FROM songs WHERE title LIKE ? ORDER BY title LIMIT ?",
            (f"%{query}%", limit),
        )
        return [Song.from_row(tuple(row)) for row in cursor.fetchall()]

    def delete_song(self, song_id: str) -> bool:
        """Delete a song that no schedule entry uses.

        Args:
            song_id: The song ID

        Returns:
            True if deleted, False if not found

        Raises:
            ValidationError: If schedule entries still reference the song
        """
        with self.transaction() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT COUNT(*) FROM schedule_entries WHERE item_type = 'song' AND item_id = ?",
                (song_id,),
            )
            in_use = cursor.fetchone()[0]
            if in_use:
                raise ValidationError(f"song {song_id} is used by {in_use} schedule entries")

            cursor.execute("DELETE FROM songs WHERE id = ?", (song_id,))
            return cursor.rowcount > 0

    # Scripture operations

    def get_scripture(self, scripture_id: str) -> Optional[Scripture]:
        """Get a scripture by ID.

        Args:
            scripture_id: The scripture ID

        Returns:
            Scripture or None if not found
        """
        cursor = self.connection.cursor()
        cursor.execute("SELECT * FROM scriptures WHERE id = ?", (scripture_id,))
        row = cursor.fetchone()

        if row:
            return Scripture.from_row(tuple(row))
        return None

    def search_scriptures(self, query: str = "", limit: int = 20) -> list[Scripture]:
        """Search scriptures by book or content.

        Args:
            query: Search query string (empty matches everything)
            limit: Maximum number of results

        Returns:
            List of matching scriptures, newest first
        """
        cursor = self.connection.cursor()
        pattern = f"%{query}%"
        cursor.execute(
            """
            SELECT * FROM scriptures
            WHERE book_id LIKE ? OR content LIKE ?
            ORDER BY created_at DESC
            LIMIT ?
            """,
            (pattern, pattern, limit),
        )
        return [Scripture.from_row(tuple(row)) for row in cursor.fetchall()]

    # Image operations

    def get_image(self, image_id: str) -> Optional[ScheduleImage]:
        """Get a schedule image by ID.

        Args:
            image_id: The image ID

        Returns:
            ScheduleImage or None if not found
        """
        cursor = self.connection.cursor()
        cursor.execute("SELECT * FROM schedule_images WHERE id = ?", (image_id,))
        row = cursor.fetchone()

        if row:
            return ScheduleImage.from_row(tuple(row))
        return None
