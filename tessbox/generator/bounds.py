"""Extracts one tightened bounding box per rendered glyph.

Glyph outlines only give an approximation of the pixels a glyph ends up
covering once it is rasterized, scaled and reduced in bit depth, while
Tesseract expects box edges that sit right on the ink. Each glyph box is
therefore computed in three steps:

1.  The glyph's ink box is clipped to its logical box grown by one pixel,
    which cuts off any bleed into the neighbouring glyphs.
2.  The clipped box is mapped to image pixels and grown by a delta that
    compensates for the tightening error the scaling introduces.
3.  Each edge is moved onto the ink by scanning a small window of rows or
    columns of the final raster for pure black pixels.
"""

import math

import numpy as np
from loguru import logger

from tessbox.common.boxes import BoxCollection, GlyphBox, Rect
from tessbox.common.exceptions import DegenerateBox
from tessbox.common.utils import is_blank_unit
from tessbox.config.schemas import GeneratorConfig, TighteningConfig

BLACK = 0


def get_bounding_box(node):
    """Returns the ink box of a text node clipped to its logical box plus one pixel.

    Returns:
        Rect | None: The clipped box, or None if the glyph draws nothing
        inside the clip.
    """
    if node.ink is None:
        return None
    stencil = node.bounds.expanded(1.0)
    return node.ink.intersection(stencil)


def resize_bounds(bounds, scale, font_size, tracking):
    """Maps working-size bounds to image pixels and grows them by the scale delta.

    The delta is `font_size * scale * tracking - 0.5` on every side, using the
    horizontal scale for both axes.
    """
    delta = font_size * scale * tracking - 0.5
    return bounds.scaled(scale).expanded(delta)


def _probe_column(pixels, x, y_start, y_stop):
    """Looks for a black pixel in column `x` between rows `y_start` and `y_stop`.

    Pixels are visited top to bottom, like a scan line would. The result is
    True on a hit, False if the whole segment is white, and None if the scan
    runs off the raster before finding a black pixel.
    """
    height, width = pixels.shape
    if y_start >= y_stop:
        return False
    if not 0 <= x < width or not 0 <= y_start < height:
        return None
    if (pixels[y_start:min(y_stop, height), x] == BLACK).any():
        return True
    return None if y_stop > height else False


def _probe_row(pixels, y, x_start, x_stop):
    """Same as `_probe_column`, for row `y` between columns `x_start` and `x_stop`."""
    return _probe_column(pixels.T, y, x_start, x_stop)


def _scan_forward(probe, edge, window):
    """Moves a left or top edge rightwards or downwards onto the ink.

    A hit at or before the edge keeps the edge, a hit past it moves the edge
    to the hit. Without a hit the edge ends at the far end of the window;
    running off the raster keeps the original edge.
    """
    start, end = window
    for pos in range(edge + start, edge + end + 1):
        hit = probe(pos)
        if hit is None:
            return edge
        if hit:
            return max(edge, pos)
    return edge + end


def _scan_backward(probe, edge, window):
    """Moves an exclusive right or bottom edge leftwards or upwards onto the ink."""
    start, end = window
    for pos in range(edge + start, edge + end - 1, -1):
        hit = probe(pos)
        if hit is None:
            return edge
        if hit:
            return min(edge, pos + 1)
    return edge + end


def tighten_bounding_box(bounds, pixels, tightening=None):
    """Fits a glyph box onto the black pixels of the page raster.

    The box is first snapped outwards to whole pixels. The left and right
    edges are scanned over the rows of the box, then the top and bottom edges
    over the columns between the tightened left and right edges. Finally the
    top edge is raised by `tightening.top_bias` pixels, growing the height by
    the same amount, to make up for the rendering engine cutting the tops of
    glyphs too close.

    Args:
        bounds (Rect): The box in image pixels.
        pixels (np.ndarray): The page raster as a 2-D array where 0 is black.
        tightening (TighteningConfig, optional): The scan windows.

    Returns:
        Rect: The tightened box.

    Raises:
        DegenerateBox: If the tightened box has no width or no height.
    """
    if tightening is None:
        tightening = TighteningConfig()

    left = int(math.floor(bounds.min_x))
    top = int(math.floor(bounds.min_y))
    right = left + int(math.ceil(bounds.width))
    bottom = top + int(math.ceil(bounds.height))

    left = _scan_forward(lambda x: _probe_column(pixels, x, top, bottom), left, tightening.left)
    right = _scan_backward(lambda x: _probe_column(pixels, x, top, bottom), right, tightening.right)
    top = _scan_forward(lambda y: _probe_row(pixels, y, left, right), top, tightening.top)
    bottom = _scan_backward(lambda y: _probe_row(pixels, y, left, right), bottom, tightening.bottom)

    top -= tightening.top_bias
    rect = Rect(left, top, right - left, bottom - top)
    if rect.is_empty:
        raise DegenerateBox(rect)
    return rect


class GlyphBoundsExtractor:
    """Builds the box collection of a rendered page.

    Attributes:
        config (GeneratorConfig): The settings the page was rendered with.
    """

    def __init__(self, config=None):
        self.config = config if config is not None else GeneratorConfig()

    def __call__(self, layout, image, page_index):
        """Computes the glyph boxes of one page.

        Units that are empty or start with whitespace get no box. Glyphs whose
        box collapses while tightening are logged and left out, so the
        returned collection only ever holds boxes with a positive size.

        Args:
            layout (PageLayout): The layout the page was rendered from.
            image (Image.Image): The rendered page after bit depth reduction.
            page_index (int): The index of the page in the output file.

        Returns:
            BoxCollection: The boxes of the page in layout order.
        """
        pixels = np.asarray(image.convert("L"))
        scale = self.config.image_scale
        boxes = BoxCollection(page_width=image.width, page_height=image.height)

        for node in layout.text_nodes:
            if is_blank_unit(node.text):
                continue
            bounds = get_bounding_box(node)
            if bounds is None:
                logger.warning(f"No ink for text {node.text!r} on page {page_index}, skipping")
                continue
            bounds = resize_bounds(bounds, scale, layout.font_size, self.config.tracking)
            try:
                rect = tighten_bounding_box(bounds, pixels, self.config.tightening)
            except DegenerateBox as e:
                logger.warning(f"ILL-Bounds: {e.rect} of text: {node.text!r}")
                continue
            boxes.add(GlyphBox(node.text, rect, page_index))

        return boxes
