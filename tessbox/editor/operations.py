"""Edit operations on the glyph boxes of a page.

Each operation takes the page's `BoxCollection` and the boxes the user has
selected, checks the selection first and raises `InvalidSelection` without
touching the collection if it does not fit, and otherwise edits the
collection in place. The return value is the position the caller should
select afterwards, or None when nothing is left to select.
"""

from enum import Enum

from tessbox.common.boxes import GlyphBox, Rect, union_all
from tessbox.common.exceptions import InvalidSelection

INSERT_OFFSET = 15
"""Horizontal distance in pixels between a box and the copy inserted after it."""

EOL_OFFSET = 10
"""Gap in pixels between the last box of a line and its end-of-line marker."""

EOL_MARKER = "\t"
"""The text of the synthetic box that marks the end of a text line."""


class Axis(str, Enum):
    WIDTH = "width"
    HEIGHT = "height"


def _selected(boxes, selection):
    """Returns the selection without repeats, checking every box is on the page."""
    unique = []
    for box in selection:
        if any(box is seen for seen in unique):
            continue
        if box not in boxes:
            raise InvalidSelection("The selected boxes must all belong to the current page.")
        unique.append(box)
    return unique


def _single(boxes, selection, none_message, operation):
    selected = _selected(boxes, selection)
    if not selected:
        raise InvalidSelection(none_message)
    if len(selected) > 1:
        raise InvalidSelection(f"Please select only one box for {operation} operation.")
    return selected[0]


def merge(boxes, selection):
    """Replaces the selected boxes with one box covering all of them.

    The new box's text is the concatenation of the selected texts in the
    order they were selected, not in page order. It takes the page of the
    last selected box and is inserted where the last selected box was, after
    the boxes selected before it have been removed.

    Raises:
        InvalidSelection: If fewer than two boxes are selected.
    """
    selected = _selected(boxes, selection)
    if len(selected) <= 1:
        raise InvalidSelection("Please select more than one box for Merge operation.")

    rect = union_all(box.rect for box in selected)
    text = "".join(box.text for box in selected)
    page = selected[-1].page
    index = 0
    for box in selected:
        index = boxes.remove(box)

    boxes.add(GlyphBox(text, rect, page), index)
    return index


def split(boxes, selection, axis=Axis.WIDTH):
    """Cuts the selected box in two equal halves.

    The selected box shrinks to the first half and a new box with the same
    text, holding the second half, is inserted right after it. With the
    default axis the box is cut into a left and a right half; with
    `Axis.HEIGHT` into a top and a bottom half.

    Raises:
        InvalidSelection: If not exactly one box is selected.
    """
    box = _single(boxes, selection, "Please select a box to split.", "Split")
    axis = Axis(axis)
    index = boxes.index(box)
    rect = box.rect

    if axis is Axis.WIDTH:
        half = rect.width / 2
        first = Rect(rect.x, rect.y, half, rect.height)
        second = Rect(rect.x + half, rect.y, half, rect.height)
    else:
        half = rect.height / 2
        first = Rect(rect.x, rect.y, rect.width, half)
        second = Rect(rect.x, rect.y + half, rect.width, half)

    box.rect = first
    boxes.add(GlyphBox(box.text, second, box.page), index + 1)
    return index


def insert(boxes, selection):
    """Inserts a copy of the selected box, shifted right, right after it.

    Raises:
        InvalidSelection: If not exactly one box is selected.
    """
    box = _single(boxes, selection, "Please select the box to insert after.", "Insert")
    index = boxes.index(box) + 1
    rect = box.rect.translated(INSERT_OFFSET, 0)
    boxes.add(GlyphBox(box.text, rect, box.page), index)
    return index


def delete(boxes, selection):
    """Removes every selected box.

    Raises:
        InvalidSelection: If no box is selected.
    """
    selected = _selected(boxes, selection)
    if not selected:
        raise InvalidSelection("Please select a box or more to delete.")
    for box in selected:
        boxes.remove(box)
    return None


def mark_line_ends(boxes, regions, page_index):
    """Adds an end-of-line marker after the last box of each text line.

    For every region, in the given order, the box with the highest position
    in the collection that lies fully inside the region gets a tab box
    inserted right after it, `EOL_OFFSET` pixels to its right and with the
    same size. Regions without a box are skipped. Markers inserted for one
    region are visible to the regions after it.

    Returns:
        int: The number of markers inserted.
    """
    inserted = 0
    for region in regions:
        last = None
        for box in boxes:
            if region.contains(box.rect):
                last = box
        if last is None:
            continue
        rect = last.rect
        marker = GlyphBox(EOL_MARKER, Rect(rect.max_x + EOL_OFFSET, rect.min_y, rect.width, rect.height), page_index)
        boxes.add(marker, boxes.index(last) + 1)
        inserted += 1
    return inserted


def mark_end_of_line(box_pages, images, segmenter):
    """Marks line ends on every page using a text-line segmenter.

    Pages are processed in order and edited in place. If the segmenter fails
    on a page, the exception propagates and the pages processed before it
    keep their markers.

    Args:
        box_pages (list[BoxCollection]): The boxes of each page.
        images (list[Image.Image]): The page rasters, in the same order.
        segmenter (Callable[[Image.Image], list[Rect]]): Returns the text
            line regions of a page.

    Returns:
        int: The total number of markers inserted.
    """
    total = 0
    for page_index, image in enumerate(images):
        regions = segmenter(image)
        total += mark_line_ends(box_pages[page_index], regions, page_index)
    return total
