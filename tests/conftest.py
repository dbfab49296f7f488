"""Shared fixtures for the tessbox tests."""

import pytest

from tessbox.common.boxes import BoxCollection, GlyphBox, Rect
from tessbox.config.schemas import GeneratorConfig


class FakeFont:
    """A font with fixed metrics: every character is 10 px wide and 10 px tall.

    It cannot draw, so tests using it through the `fake_font` fixture also get
    a fixed ink box for every glyph: 8 x 7 px, starting 1 px right of the pen
    and ending on the baseline.
    """

    size = 10

    def getmetrics(self):
        return 8, 2

    def getlength(self, text):
        return 10.0 * len(text)


def fixed_ink(font, text, origin):
    x, y = origin
    return Rect(x + 1, y - 7, 8, 7)


@pytest.fixture
def fake_font(monkeypatch):
    monkeypatch.setattr("tessbox.generator.layout.glyph_ink", fixed_ink)
    return FakeFont()


@pytest.fixture
def small_config():
    """Settings with a small margin and leading so pages stay tiny."""
    return GeneratorConfig(margin=10, leading=2)


@pytest.fixture
def page_boxes():
    """A page with four boxes "a" to "d" laid out left to right."""
    boxes = BoxCollection(page_width=200, page_height=100)
    for i, ch in enumerate("abcd"):
        boxes.add(GlyphBox(ch, Rect(10 + 20 * i, 10, 10, 20), 0))
    return boxes
