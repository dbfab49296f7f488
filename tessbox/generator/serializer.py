"""Writes glyph boxes in the Tesseract box-file format.

Each glyph becomes one line `<text> <left> <bottom> <right> <top> <page>`.
Coordinates are whole pixels with the origin at the bottom-left corner of the
page, so the top-left based rectangles of the data model are flipped using
the page height. Left and bottom edges are rounded outwards with floor/ceil,
as are right and top, so the written box always covers the float box.
"""

import math
import os
from pathlib import Path

from loguru import logger

EOL = os.linesep


def format_box_line(box, page_height, page_index):
    """Formats a single glyph box as one box-file line, without terminator.

    Example:
        A box "A" at (10, 20) of size 30x40 on a 1000 pixel high page 0 is
        written as "A 10 940 40 980 0".
    """
    rect = box.rect
    return "%s %.0f %.0f %.0f %.0f %d" % (
        box.text,
        math.floor(rect.min_x),
        page_height - math.ceil(rect.min_y + rect.height),
        math.ceil(rect.min_x + rect.width),
        page_height - math.floor(rect.min_y),
        page_index,
    )


def format_box_file(box_pages):
    """Formats the boxes of all pages, page by page in collection order.

    Args:
        box_pages (list[BoxCollection]): One collection per page; the
            position in the list is the page index written to the file.

    Returns:
        str: The box-file content, each line ending with the platform line
        terminator.
    """
    lines = []
    for page_index, boxes in enumerate(box_pages):
        for box in boxes:
            lines.append(format_box_line(box, boxes.page_height, page_index) + EOL)
    return "".join(lines)


def save_box_file(box_pages, path):
    """Writes the box file for all pages to `path` as UTF-8.

    Failures are logged and swallowed; the file may then be missing or
    partially written.

    Returns:
        bool: True if the file was written completely, False otherwise.
    """
    try:
        path = Path(path)
        with path.open("w", encoding="utf-8", newline="") as f:
            f.write(format_box_file(box_pages))
        logger.info(f"Saved box file to {path}")
        return True
    except Exception as e:
        logger.exception(f"Failed to write box file {path}: {e}")
        return False
