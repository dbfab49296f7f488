"""Page layout for the box generator.

This module arranges display units into pages of positioned nodes. Every unit
becomes a `TextNode` followed by an invisible `SpacerNode` whose width is a
fraction of the font size; the spacer is how letter tracking is produced,
since the glyphs are laid out one by one rather than as shaped runs.

Layout happens at the working font size, which is the nominal size inflated
by the configured font scale to gain sub-pixel precision. Page dimensions,
margin and leading are inflated by the same relative factor. Each call
returns a fresh, immutable `PageLayout`; nothing is shared between pages.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
from PIL import Image, ImageDraw

from tessbox.common.boxes import Rect
from tessbox.config.schemas import GeneratorConfig

LINE_BREAK = "\n"

INK_THRESHOLD = 128
"""Coverage from which a glyph pixel ends up black on a bitonal page."""


@dataclass(frozen=True)
class TextNode:
    """A positioned glyph.

    Attributes:
        text (str): The display unit, possibly several codepoints.
        origin (tuple[float, float]): The left end of the baseline, where the
            glyph is drawn from.
        bounds (Rect): The logical box: advance width by ascent plus descent.
        ink (Rect | None): The box of the pixels the glyph turns black when
            drawn at `origin`, or None for units that draw nothing, such as
            spaces.
    """

    text: str
    origin: Tuple[float, float]
    bounds: Rect
    ink: Optional[Rect]


@dataclass(frozen=True)
class SpacerNode:
    """An invisible box that adds tracking after a glyph."""

    bounds: Rect


Node = Union[TextNode, SpacerNode]


@dataclass(frozen=True)
class PageLayout:
    """The laid-out content of one page at the working font size.

    Attributes:
        width (int): The working page width in pixels.
        height (int): The working page height in pixels, grown to fit the
            content if it overflows.
        font_size (float): The working font size.
        nodes (tuple[Node, ...]): All nodes in flow order.
    """

    width: int
    height: int
    font_size: float
    nodes: Tuple[Node, ...]

    @property
    def text_nodes(self) -> List[TextNode]:
        return [node for node in self.nodes if isinstance(node, TextNode)]


@dataclass(frozen=True)
class _Item:
    unit: str
    width: float
    height: float
    is_spacer: bool = False


def working_page_size(page_size, config: GeneratorConfig) -> Tuple[int, int]:
    """Inflates a nominal (width, height) page size by the layout scale."""
    scale = config.layout_scale
    width, height = page_size
    return int(math.ceil(width * scale)), int(math.ceil(height * scale))


def page_padding(config: GeneratorConfig) -> int:
    return int(math.floor(config.margin * config.layout_scale))


def line_spacing(config: GeneratorConfig) -> int:
    return int(math.ceil(config.leading * config.layout_scale)) + config.line_spacing_adjustment


def _spacer_size(font_size, config):
    return font_size * config.tracking, font_size


def _break_lines(units, font, config, content_width):
    """Groups units into lines of measured items.

    A unit that would cross the right edge of the content box starts a new
    line unless it is the first item on its line. Spacers stay on the line of
    the unit they follow. A line-break unit closes the current line and is
    kept as its last item so pagination can hand it on to the page that
    contains the line.
    """
    font_size = font.size
    ascent, descent = font.getmetrics()
    spacer_w, spacer_h = _spacer_size(font_size, config)

    lines = [[]]
    x = 0.0
    for unit in units:
        if unit == LINE_BREAK:
            lines[-1].append(_Item(unit, 0.0, 0.0))
            lines.append([])
            x = 0.0
            continue
        for item in (_Item(unit, font.getlength(unit), ascent + descent), _Item("", spacer_w, spacer_h, True)):
            if not item.is_spacer and x + item.width > content_width and lines[-1]:
                lines.append([])
                x = 0.0
            lines[-1].append(item)
            x += item.width
    if not lines[-1]:
        lines.pop()
    return lines


def _line_extent(line, font):
    """Returns the (ascent, descent) of a line of items sitting on one baseline."""
    ascent, descent = font.getmetrics()
    line_ascent = ascent
    for item in line:
        if item.is_spacer:
            line_ascent = max(line_ascent, item.height)
    return line_ascent, descent


def layout_page(units: Sequence[str], font, page_size, config: Optional[GeneratorConfig] = None) -> PageLayout:
    """Lays out the units of one page.

    Args:
        units (Sequence[str]): The display units of the page. A "\\n" unit
            forces a line break.
        font (ImageFont.FreeTypeFont): The font at the working size.
        page_size (tuple[int, int]): The nominal page (width, height).
        config (GeneratorConfig, optional): The generator settings.

    Returns:
        PageLayout: The positioned nodes of the page.
    """
    if config is None:
        config = GeneratorConfig()
    width, height = working_page_size(page_size, config)
    padding = page_padding(config)
    spacing = line_spacing(config)
    content_width = width - 2 * padding

    nodes = []
    y = float(padding)
    for line in _break_lines(units, font, config, content_width):
        line_ascent, line_descent = _line_extent(line, font)
        baseline = y + line_ascent
        x = float(padding)
        for item in line:
            if item.unit == LINE_BREAK:
                continue
            if item.is_spacer:
                nodes.append(SpacerNode(Rect(x, baseline - item.height, item.width, item.height)))
            else:
                nodes.append(_text_node(item, font, x, baseline))
            x += item.width
        y = baseline + line_descent + spacing

    content_bottom = int(math.ceil(y - spacing)) + padding if nodes else height
    return PageLayout(width, max(height, content_bottom), font.size, tuple(nodes))


def glyph_ink(font, text, origin):
    """Finds the pixels a glyph covers when drawn with its baseline at `origin`.

    The glyph is drawn on a scratch canvas with the same sub-pixel offset it
    gets on the page, so the result matches the page raster pixel for pixel.
    Only pixels with at least `INK_THRESHOLD` coverage count, which are the
    ones left black after bit depth reduction. The advance box reported by
    `font.getbbox` is not used as is, since it includes the side bearings.

    Returns:
        Rect | None: The ink box in page pixels, or None if the glyph leaves
        no pixel black.
    """
    x, y = origin
    left, top, right, bottom = font.getbbox(text, anchor="ls")
    pad = int(math.ceil(font.size))
    shift_x, shift_y = pad - left, pad - top
    canvas = Image.new("L", (right - left + 2 * pad, bottom - top + 2 * pad), 0)
    # Pillow draws at the integer part of the position and passes the fraction on to FreeType.
    ImageDraw.Draw(canvas).text((shift_x + x - int(x), shift_y + y - int(y)), text, font=font, fill=255, anchor="ls")

    ink = np.asarray(canvas) >= INK_THRESHOLD
    cols = np.flatnonzero(ink.any(axis=0))
    rows = np.flatnonzero(ink.any(axis=1))
    if cols.size == 0:
        return None
    offset_x, offset_y = int(x) - shift_x, int(y) - shift_y
    return Rect.from_edges(
        offset_x + int(cols[0]),
        offset_y + int(rows[0]),
        offset_x + int(cols[-1]) + 1,
        offset_y + int(rows[-1]) + 1,
    )


def _text_node(item, font, x, baseline):
    ascent, descent = font.getmetrics()
    bounds = Rect(x, baseline - ascent, item.width, ascent + descent)
    ink = glyph_ink(font, item.unit, (x, baseline)) if item.unit.strip() else None
    return TextNode(item.unit, (x, baseline), bounds, ink)


def layout_pages(pages: Sequence[Sequence[str]], font, page_size, config: Optional[GeneratorConfig] = None) -> List[PageLayout]:
    """Lays out several pages, one independent `PageLayout` each."""
    return [layout_page(units, font, page_size, config) for units in pages]


def paginate(units: Sequence[str], font, page_size, config: Optional[GeneratorConfig] = None) -> List[List[str]]:
    """Breaks a stream of units into pages that fit the page height.

    Lines are wrapped exactly as `layout_page` wraps them, and a page is
    closed as soon as the next line would reach into the bottom margin. A
    line taller than a whole page still gets a page of its own.

    Args:
        units (Sequence[str]): The display units of the whole text.
        font (ImageFont.FreeTypeFont): The font at the working size.
        page_size (tuple[int, int]): The nominal page (width, height).
        config (GeneratorConfig, optional): The generator settings.

    Returns:
        list[list[str]]: The units of each page.
    """
    if config is None:
        config = GeneratorConfig()
    width, height = working_page_size(page_size, config)
    padding = page_padding(config)
    spacing = line_spacing(config)
    bottom_limit = height - padding

    pages = []
    current = []
    y = float(padding)
    for line in _break_lines(units, font, config, width - 2 * padding):
        line_ascent, line_descent = _line_extent(line, font)
        line_bottom = y + line_ascent + line_descent
        if current and line_bottom > bottom_limit:
            pages.append(current)
            current = []
            y = float(padding)
            line_bottom = y + line_ascent + line_descent
        current.extend(item.unit for item in line if not item.is_spacer)
        y = line_bottom + spacing
    if current:
        pages.append(current)
    return pages
