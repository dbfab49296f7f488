"""Geometry and the glyph box data model.

This module defines the `Rect` value type used for every rectangle in the
project, the `GlyphBox` annotation (one character or character cluster with
its rectangle and page) and the `BoxCollection` that keeps the ordered boxes
of a single page. Coordinates are page pixels with the origin at the top-left
corner; they are floats until the box file is written.
"""

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle given by its top-left corner and size."""

    x: float
    y: float
    width: float
    height: float

    @property
    def min_x(self) -> float:
        return self.x

    @property
    def min_y(self) -> float:
        return self.y

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    @classmethod
    def from_edges(cls, min_x, min_y, max_x, max_y) -> "Rect":
        return cls(min_x, min_y, max_x - min_x, max_y - min_y)

    def contains(self, other: "Rect") -> bool:
        """Checks whether `other` lies fully inside this rectangle, edges included."""
        return (
            other.min_x >= self.min_x
            and other.min_y >= self.min_y
            and other.max_x <= self.max_x
            and other.max_y <= self.max_y
        )

    def intersection(self, other: "Rect") -> Optional["Rect"]:
        """Returns the overlapping area, or None if the rectangles do not overlap."""
        min_x = max(self.min_x, other.min_x)
        min_y = max(self.min_y, other.min_y)
        max_x = min(self.max_x, other.max_x)
        max_y = min(self.max_y, other.max_y)
        if max_x <= min_x or max_y <= min_y:
            return None
        return Rect.from_edges(min_x, min_y, max_x, max_y)

    def union(self, other: "Rect") -> "Rect":
        return Rect.from_edges(
            min(self.min_x, other.min_x),
            min(self.min_y, other.min_y),
            max(self.max_x, other.max_x),
            max(self.max_y, other.max_y),
        )

    def expanded(self, dx: float, dy: Optional[float] = None) -> "Rect":
        """Grows the rectangle by `dx` on the left and right and `dy` on top and bottom."""
        if dy is None:
            dy = dx
        return Rect(self.x - dx, self.y - dy, self.width + 2 * dx, self.height + 2 * dy)

    def scaled(self, sx: float, sy: Optional[float] = None) -> "Rect":
        if sy is None:
            sy = sx
        return Rect(self.x * sx, self.y * sy, self.width * sx, self.height * sy)

    def translated(self, dx: float, dy: float) -> "Rect":
        return Rect(self.x + dx, self.y + dy, self.width, self.height)


def union_all(rects: Iterable[Rect]) -> Rect:
    """Returns the smallest rectangle covering every rectangle in `rects`.

    Raises:
        ValueError: If `rects` is empty.
    """
    rects = list(rects)
    if not rects:
        raise ValueError("union_all() needs at least one rectangle")
    result = rects[0]
    for rect in rects[1:]:
        result = result.union(rect)
    return result


@dataclass(eq=False)
class GlyphBox:
    """One annotated glyph: its display text, rectangle and page index.

    Boxes compare by identity. Two boxes holding the same character at the
    same place are still different annotations, and the edit operations look
    boxes up by identity to find their position in a collection.
    """

    text: str
    rect: Rect
    page: int = 0

    @property
    def x(self) -> float:
        return self.rect.x

    @property
    def y(self) -> float:
        return self.rect.y

    @property
    def width(self) -> float:
        return self.rect.width

    @property
    def height(self) -> float:
        return self.rect.height


@dataclass(eq=False)
class BoxCollection:
    """The ordered glyph boxes of one page.

    The order is insertion order. It is the order boxes are written to the
    box file and the index space the edit operations work in; it is never
    re-sorted spatially.

    Attributes:
        page_width (int): Width of the page raster in pixels.
        page_height (int): Height of the page raster in pixels. Used to flip
            the y axis when writing the box file.
    """

    page_width: int = 0
    page_height: int = 0
    _boxes: List[GlyphBox] = field(default_factory=list, repr=False)

    def add(self, box: GlyphBox, index: Optional[int] = None) -> None:
        """Appends `box`, or inserts it before position `index`.

        Raises:
            ValueError: If the box has no width or no height, or if it is
                already part of this collection.
        """
        if box.rect.is_empty:
            raise ValueError(f"Refusing to add degenerate box {box!r}")
        if self._find(box) is not None:
            raise ValueError(f"Box {box!r} is already in the collection")
        if index is None:
            self._boxes.append(box)
        else:
            self._boxes.insert(index, box)

    def remove(self, box: GlyphBox) -> int:
        """Removes `box` and returns the position it occupied.

        Raises:
            ValueError: If the box is not in the collection.
        """
        index = self.index(box)
        del self._boxes[index]
        return index

    def index(self, box: GlyphBox) -> int:
        index = self._find(box)
        if index is None:
            raise ValueError(f"Box {box!r} is not in the collection")
        return index

    def replace(self, start: int, stop: int, boxes: Iterable[GlyphBox]) -> None:
        """Replaces the boxes in positions `start` to `stop` (exclusive)."""
        boxes = list(boxes)
        for box in boxes:
            if box.rect.is_empty:
                raise ValueError(f"Refusing to add degenerate box {box!r}")
        self._boxes[start:stop] = boxes

    def clear(self) -> None:
        self._boxes.clear()

    def to_list(self) -> List[GlyphBox]:
        return list(self._boxes)

    def _find(self, box):
        for i, candidate in enumerate(self._boxes):
            if candidate is box:
                return i
        return None

    def __contains__(self, box) -> bool:
        return self._find(box) is not None

    def __len__(self) -> int:
        return len(self._boxes)

    def __iter__(self) -> Iterator[GlyphBox]:
        return iter(list(self._boxes))

    def __getitem__(self, index):
        return self._boxes[index]
