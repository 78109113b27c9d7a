"""Authoritative presentation state per schedule.

The store holds at most one PresentationState per schedule, created on the
first command for that schedule. Every mutation runs under the schedule's
lock and publishes its payload only after the new state is in place, so
displays never see a command the store has not committed, and commands for
one schedule reach the channel in commit order.
"""

import asyncio
from dataclasses import dataclass, replace
from typing import Any, Optional

from sow_presenter.core.chunker import DEFAULT_MAX_LINES_PER_SLIDE, chunk_text
from sow_presenter.db.models import ItemType
from sow_presenter.errors import InvalidStateError, ValidationError
from sow_presenter.logging_config import get_logger
from sow_presenter.presenter.broadcast import BroadcastChannel, topic_for
from sow_presenter.presenter.content import ContentKind, PresentableContent
from sow_presenter.presenter.payloads import (
    BlackPayload,
    NavigateToPayload,
    PresentImagePayload,
    PresentPayload,
    to_verse_index,
)

logger = get_logger(__name__)


@dataclass
class PresentationState:
    """What a schedule's displays are showing.

    Attributes:
        schedule_id: Schedule this state belongs to
        active_entry_id: Entry being presented (None before the first present)
        item_type: Kind of the active entry
        slide_index: 0-based chunk index of the current slide
        slide_count: Number of chunks of the active entry (1 for images)
        blacked: Whether the displays are blanked
        sequence: Number of commands applied so far
        last_present: Payload of the last present/present_image command
    """

    schedule_id: str
    active_entry_id: Optional[str] = None
    item_type: Optional[ItemType] = None
    slide_index: int = 0
    slide_count: int = 0
    blacked: bool = False
    sequence: int = 0
    last_present: Optional[dict[str, Any]] = None

    @property
    def verse_index(self) -> Optional[int]:
        """Wire index of the current slide, None when nothing is shown."""
        if self.active_entry_id is None or self.blacked:
            return None
        if self.item_type == ItemType.IMAGE:
            return 0
        return to_verse_index(self.slide_index)

    def to_dict(self) -> dict[str, Any]:
        return {
            "schedule_id": self.schedule_id,
            "active_entry_id": self.active_entry_id,
            "item_type": self.item_type.value if self.item_type else None,
            "slide_index": self.slide_index,
            "slide_count": self.slide_count,
            "verse_index": self.verse_index,
            "blacked": self.blacked,
            "sequence": self.sequence,
            "present": self.last_present,
        }


class PresentationStateStore:
    """Per-schedule presentation state with broadcast-after-commit.

    Attributes:
        channel: Broadcast channel commands are published on
        max_lines_per_slide: Chunk size used for every presented item
    """

    def __init__(
        self,
        channel: BroadcastChannel,
        max_lines_per_slide: int = DEFAULT_MAX_LINES_PER_SLIDE,
    ):
        """Initialize the store.

        Args:
            channel: Broadcast channel to publish on
            max_lines_per_slide: Chunk size used for every presented item
        """
        if max_lines_per_slide < 1:
            raise ValidationError("max_lines_per_slide must be at least 1")
        self.channel = channel
        self.max_lines_per_slide = max_lines_per_slide
        self._states: dict[str, PresentationState] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def _lock_for(self, schedule_id: str) -> asyncio.Lock:
        return self._locks.setdefault(schedule_id, asyncio.Lock())

    def _get_or_create(self, schedule_id: str) -> PresentationState:
        return self._states.setdefault(schedule_id, PresentationState(schedule_id=schedule_id))

    def _commit(self, state: PresentationState, payload: dict[str, Any]) -> dict[str, Any]:
        self._states[state.schedule_id] = state
        self.channel.publish(topic_for(state.schedule_id), payload)
        return payload

    def get(self, schedule_id: str) -> Optional[PresentationState]:
        """Snapshot of a schedule's state.

        Returns:
            Copy of the state, or None if no command was issued yet
        """
        state = self._states.get(schedule_id)
        return replace(state) if state else None

    def discard(self, schedule_id: str) -> None:
        """Forget a schedule's state (the schedule was deleted).

        A lock held by a running command stays in place so later commands
        for the schedule still wait for it.
        """
        self._states.pop(schedule_id, None)
        lock = self._locks.get(schedule_id)
        if lock is not None and not lock.locked():
            del self._locks[schedule_id]

    async def present(
        self, schedule_id: str, entry_id: str, content: PresentableContent
    ) -> dict[str, Any]:
        """Make an entry the active item and show its first slide.

        Args:
            schedule_id: The schedule ID
            entry_id: Entry being presented
            content: Resolved content of the entry

        Returns:
            The payload that was broadcast
        """
        async with self._lock_for(schedule_id):
            current = self._get_or_create(schedule_id)
            sequence = current.sequence + 1

            if content.kind == ContentKind.IMAGE:
                payload = PresentImagePayload(
                    image_url=content.image_url or "",
                    title=content.display_title,
                    seq=sequence,
                ).model_dump()
                slide_count = 1
            else:
                verses = chunk_text(content.body, self.max_lines_per_slide)
                payload = PresentPayload(
                    type=content.item_type.value,
                    title=content.display_title,
                    verses=verses,
                    seq=sequence,
                ).model_dump()
                slide_count = len(verses)

            state = replace(
                current,
                active_entry_id=entry_id,
                item_type=content.item_type,
                slide_index=0,
                slide_count=slide_count,
                blacked=False,
                sequence=sequence,
                last_present=payload,
            )

            logger.info(
                f"Schedule {schedule_id}: present {content.item_type.value} entry {entry_id} "
                f"({slide_count} slides)"
            )
            return self._commit(state, payload)

    def _require_navigable(self, schedule_id: str) -> PresentationState:
        current = self._states.get(schedule_id)

        if current is None or current.active_entry_id is None:
            raise InvalidStateError(f"Schedule {schedule_id} has no active item to navigate")

        if current.item_type == ItemType.IMAGE:
            raise InvalidStateError("Image items have no slides to navigate")

        return current

    def _show_slide(self, current: PresentationState, index: int) -> dict[str, Any]:
        sequence = current.sequence + 1
        payload = NavigateToPayload(verse_index=to_verse_index(index), seq=sequence).model_dump()
        state = replace(current, slide_index=index, blacked=False, sequence=sequence)

        logger.info(f"Schedule {current.schedule_id}: navigate to slide {index}")
        return self._commit(state, payload)

    async def navigate_to(self, schedule_id: str, index: int) -> dict[str, Any]:
        """Show slide ``index`` (0-based) of the active item.

        Args:
            schedule_id: The schedule ID
            index: 0-based chunk index

        Returns:
            The payload that was broadcast

        Raises:
            InvalidStateError: If nothing is presented, the active item is an
                image, or index is out of range. The state is left unchanged.
        """
        async with self._lock_for(schedule_id):
            current = self._require_navigable(schedule_id)

            if isinstance(index, bool) or not isinstance(index, int):
                raise InvalidStateError(f"Slide index must be an integer, got {index!r}")

            if not 0 <= index < current.slide_count:
                logger.warning(
                    f"Schedule {schedule_id}: rejected navigate to {index} "
                    f"(entry {current.active_entry_id} has {current.slide_count} slides)"
                )
                raise InvalidStateError(
                    f"Slide index {index} out of range for {current.slide_count} slides"
                )

            return self._show_slide(current, index)

    async def step(self, schedule_id: str, delta: int) -> Optional[dict[str, Any]]:
        """Move ``delta`` slides from the current one.

        Stepping past the first or last slide does nothing.

        Returns:
            The payload that was broadcast, or None if already at the edge

        Raises:
            InvalidStateError: If nothing is presented or the active item is an image
        """
        async with self._lock_for(schedule_id):
            current = self._require_navigable(schedule_id)
            index = current.slide_index + delta

            if not 0 <= index < current.slide_count:
                return None

            return self._show_slide(current, index)

    async def black(self, schedule_id: str) -> dict[str, Any]:
        """Blank the displays, keeping the active item and slide.

        Args:
            schedule_id: The schedule ID

        Returns:
            The payload that was broadcast
        """
        async with self._lock_for(schedule_id):
            current = self._get_or_create(schedule_id)
            sequence = current.sequence + 1
            payload = BlackPayload(seq=sequence).model_dump()
            state = replace(current, blacked=True, sequence=sequence)

            logger.info(f"Schedule {schedule_id}: black screen")
            return self._commit(state, payload)
