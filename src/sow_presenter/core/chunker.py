"""Slide chunking shared by the control plane and every display.

Slide indices travel over the wire as plain integers, so the control side
and the displays must cut content into slides with exactly the same rules.
Anything that renders slides goes through ``chunk_text``.
"""

from typing import Optional

from sow_presenter.errors import ValidationError

DEFAULT_MAX_LINES_PER_SLIDE = 4


def split_paragraphs(body: Optional[str]) -> list[list[str]]:
    """Split text into paragraphs of non-blank lines.

    A blank line is one that is empty after trimming whitespace. One or more
    blank lines end a paragraph.

    Args:
        body: Raw item text

    Returns:
        List of paragraphs, each a list of lines in original order
    """
    if not body:
        return []

    paragraphs: list[list[str]] = []
    current: list[str] = []

    for line in body.split("\n"):
        line = line.rstrip("\r")
        if line.strip():
            current.append(line)
        elif current:
            paragraphs.append(current)
            current = []

    if current:
        paragraphs.append(current)

    return paragraphs


def chunk_text(body: Optional[str], max_lines_per_slide: int = DEFAULT_MAX_LINES_PER_SLIDE) -> list[str]:
    """Cut item text into slide chunks.

    Each paragraph yields one chunk per run of up to ``max_lines_per_slide``
    lines. A paragraph boundary always starts a new chunk, even when the
    previous chunk has room left.

    Args:
        body: Raw item text (None or whitespace-only yields no slides)
        max_lines_per_slide: Maximum lines on one slide

    Returns:
        Ordered list of chunks, lines joined with a single newline

    Raises:
        ValidationError: If max_lines_per_slide is less than 1
    """
    if max_lines_per_slide < 1:
        raise ValidationError(f"max_lines_per_slide must be at least 1, got {max_lines_per_slide}")

    chunks = []
    for paragraph in split_paragraphs(body):
        for start in range(0, len(paragraph), max_lines_per_slide):
            chunks.append("\n".join(paragraph[start : start + max_lines_per_slide]))
    return chunks


def count_slides(body: Optional[str], max_lines_per_slide: int = DEFAULT_MAX_LINES_PER_SLIDE) -> int:
    """Number of slides ``chunk_text`` produces for the given text."""
    return len(chunk_text(body, max_lines_per_slide))
