"""Display-side reconciliation of presenter payloads.

A display rebuilds its slides from each ``present`` payload with the shared
chunker, puts the title sub-slide in front (wire index 0) and then follows
``navigate_to`` / ``black`` commands. Indices it cannot show are ignored,
even though the control plane validates them first.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from pydantic import ValidationError as PayloadValidationError

from sow_presenter.core.chunker import DEFAULT_MAX_LINES_PER_SLIDE, chunk_text
from sow_presenter.logging_config import get_logger
from sow_presenter.presenter.broadcast import Subscription
from sow_presenter.presenter.payloads import (
    BlackPayload,
    NavigateToPayload,
    PresentImagePayload,
    PresentPayload,
    parse_payload,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class DisplayView:
    """What the display is rendering right now.

    Attributes:
        kind: "blank", "title", "text" or "image"
        text: Slide text for title/text views
        image_url: Image location for image views
        index: Wire index of the slide (None when blank)
    """

    kind: str
    text: Optional[str] = None
    image_url: Optional[str] = None
    index: Optional[int] = None


BLANK = DisplayView(kind="blank")


class DisplayClient:
    """Follows presenter payloads the way a projector display does.

    Attributes:
        max_lines_per_slide: Chunk size, must match the control plane
        title: Title of the presented item
        slides: Title slide followed by the item's chunks
        image_url: Image of a presented image item
        current_index: Wire index being shown (None when blank)
        is_black: Whether the screen is blanked
        last_seq: Sequence number of the last applied payload
    """

    def __init__(self, max_lines_per_slide: int = DEFAULT_MAX_LINES_PER_SLIDE):
        self.max_lines_per_slide = max_lines_per_slide
        self.title: Optional[str] = None
        self.item_type: Optional[str] = None
        self.slides: list[str] = []
        self.image_url: Optional[str] = None
        self.current_index: Optional[int] = None
        self.is_black = False
        self.last_seq: Optional[int] = None

    @property
    def view(self) -> DisplayView:
        """Current rendering of the display."""
        if self.is_black or self.current_index is None:
            return BLANK
        if self.image_url is not None:
            return DisplayView(kind="image", image_url=self.image_url, index=0)
        kind = "title" if self.current_index == 0 else "text"
        return DisplayView(kind=kind, text=self.slides[self.current_index], index=self.current_index)

    @property
    def current_slide(self) -> Optional[str]:
        """Text on screen, None when blank or showing an image."""
        return self.view.text

    @property
    def verse_slides(self) -> list[str]:
        """The item's chunks without the title slide."""
        return self.slides[1:]

    def apply(self, payload: dict[str, Any]) -> bool:
        """Apply one payload.

        Args:
            payload: Received payload dict

        Returns:
            True if the payload changed what is on screen
        """
        try:
            command = parse_payload(payload)
        except PayloadValidationError:
            logger.debug(f"Ignoring unrecognized payload: {payload!r}")
            return False

        if self.last_seq is not None and command.seq and command.seq <= self.last_seq:
            logger.warning(f"Payload seq {command.seq} arrived after seq {self.last_seq}")
        if command.seq:
            self.last_seq = command.seq

        before = self.view

        if isinstance(command, PresentPayload):
            self._present(command)
        elif isinstance(command, PresentImagePayload):
            self._present_image(command)
        elif isinstance(command, NavigateToPayload):
            self._navigate_to(command.verse_index)
        elif isinstance(command, BlackPayload):
            self.is_black = True
            self.current_index = None

        return self.view != before

    def _present(self, command: PresentPayload) -> None:
        chunks: list[str] = []
        for verse in command.verses:
            chunks.extend(chunk_text(verse, self.max_lines_per_slide))

        self.title = command.title
        self.item_type = command.type
        self.slides = [command.title] + chunks
        self.image_url = None
        self.current_index = 0
        self.is_black = False

    def _present_image(self, command: PresentImagePayload) -> None:
        self.title = command.title
        self.item_type = "image"
        self.slides = []
        self.image_url = command.image_url
        self.current_index = 0
        self.is_black = False

    def _navigate_to(self, verse_index: int) -> None:
        if not 0 <= verse_index < len(self.slides):
            logger.debug(f"Ignoring navigate_to {verse_index} ({len(self.slides)} slides)")
            return
        self.current_index = verse_index
        self.is_black = False

    async def run(
        self,
        subscription: Subscription,
        on_change: Optional[Callable[[DisplayView], Awaitable[None]]] = None,
    ) -> None:
        """Apply payloads from a subscription until it is closed.

        Args:
            subscription: Subscription to consume
            on_change: Awaited with the new view whenever it changes
        """
        async for payload in subscription:
            if self.apply(payload) and on_change is not None:
                await on_change(self.view)
