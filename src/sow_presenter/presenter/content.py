"""Resolution of schedule entries into presentable content.

A schedule entry is a tagged reference ``(item_type, item_id)``. Each item
type has its own resolver that turns the referenced row into a
``PresentableContent`` the presenter can chunk or show as an image.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from sow_presenter.db.catalog_client import CatalogClient
from sow_presenter.db.models import ItemType, ScheduleEntry
from sow_presenter.errors import NotFoundError


class ContentKind(str, Enum):
    """How content is shown on a display."""

    TEXT = "text"
    IMAGE = "image"


@dataclass(frozen=True)
class PresentableContent:
    """Read-only view of an entry's content.

    Attributes:
        kind: TEXT content is chunked into slides, IMAGE is a single slide
        item_type: Kind of the underlying item
        display_title: Title shown on the title slide and in the editor
        body: Text to chunk (None for images)
        image_url: Image location (None for text)
    """

    kind: ContentKind
    item_type: ItemType
    display_title: str
    body: Optional[str] = None
    image_url: Optional[str] = None


def _resolve_song(catalog: CatalogClient, item_id: str) -> Optional[PresentableContent]:
    song = catalog.get_song(item_id)
    if song is None:
        return None
    return PresentableContent(
        kind=ContentKind.TEXT,
        item_type=ItemType.SONG,
        display_title=song.title,
        body=song.content,
    )


def _resolve_scripture(catalog: CatalogClient, item_id: str) -> Optional[PresentableContent]:
    scripture = catalog.get_scripture(item_id)
    if scripture is None:
        return None
    return PresentableContent(
        kind=ContentKind.TEXT,
        item_type=ItemType.SCRIPTURE,
        display_title=scripture.bible_reference,
        body=scripture.content,
    )


def _resolve_image(catalog: CatalogClient, item_id: str) -> Optional[PresentableContent]:
    image = catalog.get_image(item_id)
    if image is None:
        return None
    return PresentableContent(
        kind=ContentKind.IMAGE,
        item_type=ItemType.IMAGE,
        display_title=image.title,
        image_url=image.image_url,
    )


Resolver = Callable[[CatalogClient, str], Optional[PresentableContent]]

RESOLVERS: dict[ItemType, Resolver] = {
    ItemType.SONG: _resolve_song,
    ItemType.SCRIPTURE: _resolve_scripture,
    ItemType.IMAGE: _resolve_image,
}


class ContentResolver:
    """Looks up the content behind schedule entries."""

    def __init__(self, catalog: CatalogClient):
        """Initialize the resolver.

        Args:
            catalog: Client for the content tables
        """
        self.catalog = catalog

    def resolve(self, entry: ScheduleEntry) -> PresentableContent:
        """Resolve an entry to its content.

        Args:
            entry: Schedule entry to resolve

        Returns:
            PresentableContent for the entry

        Raises:
            NotFoundError: If the referenced content no longer exists
        """
        content = RESOLVERS[entry.item_type](self.catalog, entry.item_id)
        if content is None:
            raise NotFoundError(
                f"{entry.item_type.value} {entry.item_id} referenced by entry {entry.id} not found"
            )
        return content
