"""Bible browser used to build scripture entries."""

from sow_presenter.bible.loader import BIBLE_VERSIONS, BibleLoader, Passage, build_passage, parse_zefania

__all__ = ["BIBLE_VERSIONS", "BibleLoader", "Passage", "build_passage", "parse_zefania"]
