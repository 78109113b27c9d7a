"""Zefania XML bible loader for the scripture browser.

Parses bible files of the form::

    <XMLBIBLE>
      <BIBLEBOOK bname="Juan">
        <CHAPTER cnumber="3">
          <VERS vnumber="16">Porque de tal manera amó Dios al mundo...</VERS>

into books, chapters and verses, and builds passage text from a selection
of verses.
"""

import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

from bs4 import BeautifulSoup, XMLParsedAsHTMLWarning

from sow_presenter.errors import NotFoundError, ValidationError
from sow_presenter.logging_config import get_logger

logger = get_logger(__name__)

# Bible version code -> file name inside the bible directory
BIBLE_FILES = {
    "NVI": "spa-NVI.xmm.xml",
    "RVR09": "spa-RVR09.usfx.xml",
    "RVR1960": "spa-RVR1960.xml",
}

# Versions offered when creating a scripture
BIBLE_VERSIONS = ["NVI", "RVR1960"]


@dataclass
class Verse:
    num: int
    text: str
    book_title: str
    chapter_num: int

    def to_dict(self) -> dict:
        return {
            "num": self.num,
            "text": self.text,
            "book_id": self.book_title,
            "chapter_num": self.chapter_num,
        }


@dataclass
class Chapter:
    num: int
    book_title: str
    verses: list[Verse] = field(default_factory=list)


@dataclass
class Book:
    title: str
    chapters: list[Chapter] = field(default_factory=list)

    def chapter(self, num: int) -> Optional[Chapter]:
        return next((c for c in self.chapters if c.num == num), None)


@dataclass
class Bible:
    version: str
    books: list[Book] = field(default_factory=list)

    def book(self, title: str) -> Optional[Book]:
        return next((b for b in self.books if b.title == title), None)


@dataclass
class Passage:
    """Text and range of a verse selection."""

    book_title: str
    chapter_num: int
    verse_from: int
    verse_to: Optional[int]
    content: str


def parse_zefania(xml_text: str, version: str) -> Bible:
    """Parse Zefania XML into a Bible.

    Args:
        xml_text: Contents of the bible file
        version: Version code the file belongs to

    Returns:
        Parsed Bible
    """
    # html.parser lowercases tag and attribute names
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", XMLParsedAsHTMLWarning)
        soup = BeautifulSoup(xml_text, "html.parser")
    bible = Bible(version=version)

    for book_node in soup.find_all("biblebook"):
        book = Book(title=book_node.get("bname", ""))

        for chapter_node in book_node.find_all("chapter", recursive=False):
            chapter = Chapter(num=int(chapter_node.get("cnumber", 0)), book_title=book.title)

            for verse_node in chapter_node.find_all("vers", recursive=False):
                chapter.verses.append(
                    Verse(
                        num=int(verse_node.get("vnumber", 0)),
                        text=verse_node.get_text().strip(),
                        book_title=book.title,
                        chapter_num=chapter.num,
                    )
                )

            book.chapters.append(chapter)

        bible.books.append(book)

    return bible


def build_passage(verses: Iterable[Verse]) -> Passage:
    """Build scripture text from selected verses.

    Verses are ordered by number and written one per line as "N. text".

    Args:
        verses: Selected verses of a single chapter

    Returns:
        Passage with range and content

    Raises:
        ValidationError: If no verses are given
    """
    ordered = sorted(verses, key=lambda v: v.num)
    if not ordered:
        raise ValidationError("Select at least one verse")

    first, last = ordered[0], ordered[-1]
    return Passage(
        book_title=first.book_title,
        chapter_num=first.chapter_num,
        verse_from=first.num,
        verse_to=None if last.num == first.num else last.num,
        content="\n".join(f"{v.num}. {v.text}" for v in ordered),
    )


class BibleLoader:
    """Loads and caches bibles from a directory of Zefania XML files.

    Attributes:
        bible_dir: Directory holding the bible files
        default_version: Version used when none is requested
    """

    def __init__(self, bible_dir: Path, default_version: str = "NVI"):
        self.bible_dir = Path(bible_dir)
        self.default_version = default_version
        self._cache: dict[str, Bible] = {}

    def bible_path(self, version: str) -> Path:
        """Path of the file for a version.

        Raises:
            NotFoundError: If the version is unknown
        """
        filename = BIBLE_FILES.get(version)
        if filename is None:
            raise NotFoundError(f"Unknown bible version: {version}")
        return self.bible_dir / filename

    def load(self, version: Optional[str] = None) -> Bible:
        """Load a bible, parsing the file on first use.

        Args:
            version: Version code (defaults to default_version)

        Returns:
            Parsed Bible

        Raises:
            NotFoundError: If the version is unknown or its file is missing
        """
        version = version or self.default_version
        if version in self._cache:
            return self._cache[version]

        path = self.bible_path(version)
        if not path.exists():
            raise NotFoundError(f"Bible file for {version} not found: {path}")

        logger.info(f"Loading bible {version} from {path}")
        bible = parse_zefania(path.read_text(encoding="utf-8"), version)
        self._cache[version] = bible
        return bible

    def books(self, version: Optional[str] = None) -> list[Book]:
        return self.load(version).books

    def get_book(self, version: Optional[str], book_title: str) -> Book:
        book = self.load(version).book(book_title)
        if book is None:
            raise NotFoundError(f"Book not found: {book_title}")
        return book

    def get_chapter(self, version: Optional[str], book_title: str, chapter_num: int) -> Chapter:
        chapter = self.get_book(version, book_title).chapter(chapter_num)
        if chapter is None:
            raise NotFoundError(f"Chapter not found: {book_title} {chapter_num}")
        return chapter

    def select_passage(
        self,
        version: Optional[str],
        book_title: str,
        chapter_num: int,
        verse_nums: Iterable[int],
    ) -> Passage:
        """Build a passage from verse numbers of one chapter.

        Raises:
            NotFoundError: If the book, chapter or a verse does not exist
            ValidationError: If no verse numbers are given
        """
        wanted = {int(n) for n in verse_nums}
        if not wanted:
            raise ValidationError("Select at least one verse")

        chapter = self.get_chapter(version, book_title, chapter_num)
        selected = [v for v in chapter.verses if v.num in wanted]

        missing = wanted - {v.num for v in selected}
        if missing:
            raise NotFoundError(
                f"Verses not found in {book_title} {chapter_num}: "
                f"{', '.join(str(n) for n in sorted(missing))}"
            )

        return build_passage(selected)
