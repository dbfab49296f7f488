"""Tests for the page layout engine.

Most tests use a font with fixed metrics (see `conftest.py`) so that node
positions can be checked exactly: every glyph is 10 px wide, the ascent is 8
and the descent 2, and the tracking spacer is 1 x 10 px.
"""

import numpy as np
import pytest
from PIL import Image, ImageDraw, ImageFont

from tessbox.common.boxes import Rect
from tessbox.config.schemas import GeneratorConfig
from tessbox.generator.layout import (
    SpacerNode,
    TextNode,
    glyph_ink,
    layout_page,
    layout_pages,
    line_spacing,
    page_padding,
    paginate,
    working_page_size,
)

PAGE = (100, 60)


def test_scaled_page_geometry():
    """Tests that page size, margin and leading grow with the font scale.

    A font scale of 8 doubles them, and the line spacing adjustment is added
    after scaling.
    """
    config = GeneratorConfig(font_scale=8, margin=10, leading=2)
    assert working_page_size((100, 60), config) == (200, 120)
    assert page_padding(config) == 20
    assert line_spacing(config) == 8


def test_unit_is_followed_by_spacer(fake_font, small_config):
    """Tests the position of a glyph and its tracking spacer."""
    layout = layout_page(["a", "b"], fake_font, PAGE, small_config)
    assert (layout.width, layout.height, layout.font_size) == (100, 60, 10)
    assert [type(node) for node in layout.nodes] == [TextNode, SpacerNode, TextNode, SpacerNode]

    a, spacer, b, _ = layout.nodes
    assert a.text == "a"
    assert a.origin == (10, 20)
    assert a.bounds == Rect(10, 12, 10, 10)
    assert a.ink == Rect(11, 13, 8, 7)
    assert spacer.bounds == Rect(20, 10, 1, 10)
    assert b.origin == (21, 20)


def test_whitespace_has_no_ink(fake_font, small_config):
    """Tests that a space is laid out like any unit but has no ink box."""
    layout = layout_page(["a", " ", "b"], fake_font, PAGE, small_config)
    space = layout.text_nodes[1]
    assert space.text == " "
    assert space.ink is None
    assert layout.text_nodes[2].origin == (32, 20)


def test_lines_wrap_at_content_width(fake_font, small_config):
    """Tests that the unit crossing the right margin starts a new line."""
    units = list("abcdefgh")
    layout = layout_page(units, fake_font, PAGE, small_config)
    origins = [node.origin for node in layout.text_nodes]
    assert origins[6] == (76, 20)
    assert origins[7] == (10, 38)


def test_line_break_unit_forces_new_line(fake_font, small_config):
    """Tests that a line break unit starts a new line without a node of its own."""
    layout = layout_page(["a", "\n", "b"], fake_font, PAGE, small_config)
    assert [node.text for node in layout.text_nodes] == ["a", "b"]
    assert layout.text_nodes[1].origin == (10, 38)


def test_empty_page(fake_font, small_config):
    """Tests that a page without units keeps its size and has no nodes."""
    layout = layout_page([], fake_font, PAGE, small_config)
    assert layout.nodes == ()
    assert (layout.width, layout.height) == PAGE


def test_overflowing_content_grows_page(fake_font, small_config):
    """Tests that the page height grows when the lines do not fit."""
    layout = layout_page(["a", "\n", "b", "\n", "c"], fake_font, PAGE, small_config)
    assert layout.text_nodes[2].origin == (10, 56)
    assert layout.height == 68


def test_pages_are_independent(fake_font, small_config):
    """Tests that every page is laid out from the top, independently of the others."""
    first, second = layout_pages([["a"], ["b"]], fake_font, PAGE, small_config)
    assert first.text_nodes[0].origin == second.text_nodes[0].origin
    assert first.text_nodes[0].text == "a"
    assert second.text_nodes[0].text == "b"


def test_paginate_breaks_before_bottom_margin(fake_font, small_config):
    """Tests that a line reaching into the bottom margin moves to the next page.

    The line break units stay with the lines they end.
    """
    units = ["a", "\n", "b", "\n", "c"]
    assert paginate(units, fake_font, PAGE, small_config) == [["a", "\n", "b", "\n"], ["c"]]


def test_paginate_single_page_and_empty_text(fake_font, small_config):
    """Tests that short text gives one page and no text gives no pages."""
    assert paginate(["a", "b"], fake_font, PAGE, small_config) == [["a", "b"]]
    assert paginate([], fake_font, PAGE, small_config) == []


def test_paginated_pages_lay_out_within_page(small_config):
    """Tests with a real font that every paginated page fits its height."""
    font = ImageFont.load_default(size=40)
    units = list("The quick brown fox jumps over the lazy dog. " * 6)
    pages = paginate(units, font, (400, 300), small_config)
    assert len(pages) > 1
    assert sum(len(page) for page in pages) == len(units)
    for page in pages:
        layout = layout_page(page, font, (400, 300), small_config)
        assert layout.height == 300
        for node in layout.text_nodes:
            assert node.bounds.max_y <= 300 - 10


@pytest.mark.parametrize("text, origin", [("H", (10, 50)), ("l", (10.4, 50)), ("g", (33.8, 50.5))])
def test_glyph_ink_matches_drawn_pixels(text, origin):
    """Tests that the ink box is the box of the black pixels of the drawn glyph.

    The glyph is drawn the way pages are drawn, black on white at a possibly
    fractional position, and thresholded at mid gray. The ink box must be
    exactly the bounding box of what is left black, and lie inside the
    glyph's advance box rather than equal to it.
    """
    font = ImageFont.load_default(size=48)
    image = Image.new("RGB", (120, 100), "white")
    ImageDraw.Draw(image).text(origin, text, font=font, fill="black", anchor="ls")
    black = np.asarray(image.convert("L")) < 128
    cols = np.flatnonzero(black.any(axis=0))
    rows = np.flatnonzero(black.any(axis=1))

    ink = glyph_ink(font, text, origin)
    assert ink == Rect.from_edges(int(cols[0]), int(rows[0]), int(cols[-1]) + 1, int(rows[-1]) + 1)
    assert ink.width < font.getlength(text)


def test_glyph_ink_of_space_is_none():
    """Tests that a glyph leaving no black pixel has no ink box."""
    font = ImageFont.load_default(size=48)
    assert glyph_ink(font, " ", (10, 50)) is None
