"""Control plane for schedules and live presentation.

ScheduleEditor owns the ordered entry list of each schedule and is the only
caller of the PresentationStateStore. Presentation commands resolve and
validate everything they need before touching presentation state, so a
failed command never leaves the store half-updated.
"""

from dataclasses import dataclass
from typing import Any, Optional

from sow_presenter.bible.loader import BibleLoader
from sow_presenter.core.chunker import count_slides
from sow_presenter.db.catalog_client import CatalogClient
from sow_presenter.db.models import ItemType, ScheduleEntry
from sow_presenter.db.schedule_client import ScheduleClient
from sow_presenter.errors import InvalidStateError, NotFoundError
from sow_presenter.logging_config import get_logger
from sow_presenter.presenter.content import ContentKind, ContentResolver
from sow_presenter.presenter.state import PresentationState, PresentationStateStore

logger = get_logger(__name__)


@dataclass
class EntrySummary:
    """Schedule entry with its resolved title and content.

    Attributes:
        id: Entry ID
        schedule_id: Schedule the entry belongs to
        item_type: Kind of referenced content
        item_id: ID of the referenced content
        position: Position in the schedule
        title: Resolved display title
        content: Body text, or image URL for images
        slide_count: Slides the entry produces when presented
    """

    id: str
    schedule_id: str
    item_type: ItemType
    item_id: str
    position: int
    title: str
    content: Optional[str]
    slide_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "schedule_id": self.schedule_id,
            "item_type": self.item_type.value,
            "item_id": self.item_id,
            "position": self.position,
            "title": self.title,
            "content": self.content,
            "slide_count": self.slide_count,
        }


class ScheduleEditor:
    """Schedule entry editing and presentation commands.

    Attributes:
        schedules: Client for schedules and entries
        catalog: Client for songs, scriptures and images
        store: Presentation state store
        resolver: Entry content resolver
        bible: Bible loader for scripture entries (optional)
    """

    def __init__(
        self,
        schedules: ScheduleClient,
        catalog: CatalogClient,
        store: PresentationStateStore,
        bible: Optional[BibleLoader] = None,
    ):
        self.schedules = schedules
        self.catalog = catalog
        self.store = store
        self.resolver = ContentResolver(catalog)
        self.bible = bible

    # Lookups

    def _require_schedule(self, schedule_id: str) -> None:
        if self.schedules.get_schedule(schedule_id) is None:
            raise NotFoundError(f"Schedule not found: {schedule_id}")

    def _require_entry(self, schedule_id: str, entry_id: str) -> ScheduleEntry:
        entry = self.schedules.get_entry(entry_id)
        if entry is None or entry.schedule_id != schedule_id:
            raise NotFoundError(f"Entry {entry_id} not found in schedule {schedule_id}")
        return entry

    def summarize(self, entry: ScheduleEntry) -> EntrySummary:
        """Resolve an entry into an EntrySummary.

        Raises:
            NotFoundError: If the referenced content no longer exists
        """
        content = self.resolver.resolve(entry)
        if content.kind == ContentKind.IMAGE:
            body, slide_count = content.image_url, 1
        else:
            body = content.body
            slide_count = count_slides(content.body, self.store.max_lines_per_slide)

        return EntrySummary(
            id=entry.id,
            schedule_id=entry.schedule_id,
            item_type=entry.item_type,
            item_id=entry.item_id,
            position=entry.position,
            title=content.display_title,
            content=body,
            slide_count=slide_count,
        )

    def list_entries(self, schedule_id: str) -> list[EntrySummary]:
        """Entries of a schedule in position order.

        Raises:
            NotFoundError: If the schedule or an entry's content is missing
        """
        self._require_schedule(schedule_id)
        return [self.summarize(entry) for entry in self.schedules.get_entries(schedule_id)]

    # Entry editing

    def add_entry(self, schedule_id: str, item_type: Optional[str], item_id: str) -> EntrySummary:
        """Append existing content to a schedule.

        Args:
            schedule_id: The schedule ID
            item_type: "song", "scripture" or "image" (case-insensitive)
            item_id: ID of the content

        Returns:
            Summary of the created entry

        Raises:
            NotFoundError: If the schedule does not exist
            ValidationError: If the item type is unknown or the content is missing
        """
        entry = self.schedules.add_entry(schedule_id, ItemType.parse(item_type), item_id)
        logger.info(f"Schedule {schedule_id}: added {entry.item_type.value} {entry.item_id} at {entry.position}")
        return self.summarize(entry)

    def add_scripture_from_bible(
        self,
        schedule_id: str,
        bible_version: Optional[str],
        book: str,
        chapter: int,
        verse_nums: list[int],
    ) -> EntrySummary:
        """Create a scripture from selected verses and append it.

        The scripture is owned by the new entry and is deleted with it.

        Raises:
            InvalidStateError: If no bible directory is configured
            NotFoundError: If the schedule, book, chapter or a verse is missing
            ValidationError: If no verses are selected
        """
        if self.bible is None:
            raise InvalidStateError("Bible lookup is not configured")

        self._require_schedule(schedule_id)
        version = bible_version or self.bible.default_version
        passage = self.bible.select_passage(version, book, chapter, verse_nums)

        _, entry = self.schedules.add_scripture_entry(
            schedule_id,
            book_id=passage.book_title,
            chapter_num=passage.chapter_num,
            verse_from=passage.verse_from,
            verse_to=passage.verse_to,
            bible_version=version,
            content=passage.content,
        )
        logger.info(f"Schedule {schedule_id}: added scripture {entry.item_id} at {entry.position}")
        return self.summarize(entry)

    def add_image(self, schedule_id: str, image_url: str, name: Optional[str] = None) -> EntrySummary:
        """Register an image and append it to a schedule.

        Raises:
            NotFoundError: If the schedule does not exist
            ValidationError: If image_url is empty
        """
        _, entry = self.schedules.add_image_entry(schedule_id, image_url, name)
        logger.info(f"Schedule {schedule_id}: added image {entry.item_id} at {entry.position}")
        return self.summarize(entry)

    def remove_entry(self, schedule_id: str, entry_id: str) -> None:
        """Remove an entry (and its scripture, if it owns one).

        Raises:
            NotFoundError: If the entry is not in the schedule
        """
        self._require_entry(schedule_id, entry_id)
        self.schedules.remove_entry(entry_id)
        logger.info(f"Schedule {schedule_id}: removed entry {entry_id}")

    def reorder(self, schedule_id: str, ordered_entry_ids: list[str]) -> list[ScheduleEntry]:
        """Rewrite entry positions, all or nothing.

        Raises:
            NotFoundError: If the schedule does not exist
            ValidationError: If the order is empty, has duplicates, or names
                an entry outside the schedule
        """
        entries = self.schedules.reorder_entries(schedule_id, ordered_entry_ids)
        logger.info(f"Schedule {schedule_id}: reordered {len(ordered_entry_ids)} entries")
        return entries

    def delete_schedule(self, schedule_id: str) -> None:
        """Delete a schedule with its entries and presentation state.

        Raises:
            NotFoundError: If the schedule does not exist
        """
        if not self.schedules.delete_schedule(schedule_id):
            raise NotFoundError(f"Schedule not found: {schedule_id}")
        self.store.discard(schedule_id)
        logger.info(f"Deleted schedule {schedule_id}")

    # Presentation commands

    async def present_entry(self, schedule_id: str, entry_id: str) -> dict[str, Any]:
        """Present an entry on every display of the schedule.

        Returns:
            The payload that was broadcast

        Raises:
            NotFoundError: If the entry or its content is missing
        """
        entry = self._require_entry(schedule_id, entry_id)
        content = self.resolver.resolve(entry)
        return await self.store.present(schedule_id, entry.id, content)

    async def navigate(self, schedule_id: str, slide_index: int) -> dict[str, Any]:
        """Show slide ``slide_index`` (0-based) of the presented entry.

        Returns:
            The payload that was broadcast

        Raises:
            NotFoundError: If the schedule does not exist
            InvalidStateError: If nothing is presented or the index is out of range
        """
        self._require_schedule(schedule_id)
        return await self.store.navigate_to(schedule_id, slide_index)

    async def next_slide(self, schedule_id: str) -> Optional[dict[str, Any]]:
        """Show the slide after the current one, if there is one.

        Returns:
            The payload that was broadcast, or None on the last slide
        """
        self._require_schedule(schedule_id)
        return await self.store.step(schedule_id, 1)

    async def previous_slide(self, schedule_id: str) -> Optional[dict[str, Any]]:
        """Show the slide before the current one, if there is one.

        Returns:
            The payload that was broadcast, or None on the first slide
        """
        self._require_schedule(schedule_id)
        return await self.store.step(schedule_id, -1)

    async def black_screen(self, schedule_id: str) -> dict[str, Any]:
        """Blank every display of the schedule.

        Raises:
            NotFoundError: If the schedule does not exist
        """
        self._require_schedule(schedule_id)
        return await self.store.black(schedule_id)

    def current_state(self, schedule_id: str) -> PresentationState:
        """Current presentation state, for displays that reconnect.

        Raises:
            NotFoundError: If the schedule does not exist
        """
        self._require_schedule(schedule_id)
        return self.store.get(schedule_id) or PresentationState(schedule_id=schedule_id)
