"""Pydantic models for the broadcast payloads sent to displays.

Payloads are published as plain dicts on ``schedule_presenter_{id}``:

    present:       {action: "present", type, title, verses}
    present_image: {action: "present_image", image_url, title}
    navigate_to:   {action: "navigate_to", verse_index}
    black:         {action: "black"}

``verse_index`` is 1-based: index 0 is the title sub-slide the display puts
in front of the verses. Every payload also carries ``seq``, the per-schedule
command sequence number.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter

# Offset between a slide index in chunk order and the wire verse_index
TITLE_SLIDE_OFFSET = 1


class PresentPayload(BaseModel):
    """Show a text item, starting at its title slide."""

    action: Literal["present"] = "present"
    type: Literal["song", "scripture"]
    title: str
    verses: list[str]
    seq: int = 0


class PresentImagePayload(BaseModel):
    """Show an image as a single slide."""

    action: Literal["present_image"] = "present_image"
    image_url: str
    title: str = ""
    seq: int = 0


class NavigateToPayload(BaseModel):
    """Show one slide of the presented text item."""

    action: Literal["navigate_to"] = "navigate_to"
    verse_index: int
    seq: int = 0


class BlackPayload(BaseModel):
    """Blank the display."""

    action: Literal["black"] = "black"
    seq: int = 0


PresenterPayload = Annotated[
    Union[PresentPayload, PresentImagePayload, NavigateToPayload, BlackPayload],
    Field(discriminator="action"),
]

_payload_adapter: TypeAdapter = TypeAdapter(PresenterPayload)


def parse_payload(data: Any) -> BaseModel:
    """Parse a received payload dict into its model.

    Raises:
        pydantic.ValidationError: If the payload is malformed or the action
            is unknown
    """
    return _payload_adapter.validate_python(data)


def to_verse_index(slide_index: int) -> int:
    """Convert a 0-based chunk index into the 1-based wire verse_index."""
    return slide_index + TITLE_SLIDE_OFFSET
