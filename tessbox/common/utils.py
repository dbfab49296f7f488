"""Text helpers for the box generation pipeline.

This module provides the character-level utilities used to turn raw text into
the display units that are laid out and boxed one by one. A display unit is
usually one character, but combining marks and joiners stay attached to the
character they modify so that, for example, a base letter with its accent is
boxed as a single glyph.
"""

import unicodedata

ZERO_WIDTH_JOINER = "\u200d"
ZERO_WIDTH_NON_JOINER = "\u200c"


def is_combining(ch):
    """Checks if a character attaches to the character before it.

    Combining marks (Unicode categories Mn, Mc and Me) as well as the zero
    width joiner and non-joiner never stand on their own in a box file; they
    belong to the preceding base character.

    Args:
        ch (str): The character to check. Must be a single character.

    Returns:
        True if the character should be merged into the previous unit.
    """
    try:
        if len(str(ch)) != 1:
            return False
        if ch in (ZERO_WIDTH_JOINER, ZERO_WIDTH_NON_JOINER):
            return True
        return unicodedata.category(ch).startswith("M")
    except (TypeError, ValueError):
        return False


def is_blank_unit(unit):
    """Checks if a display unit is empty or starts with whitespace.

    Such units take part in the layout but never get a glyph box.
    """
    return len(unit) == 0 or unit[0].isspace()


def split_into_units(text):
    """Splits text into display units, one per boxed glyph.

    Line endings are normalized so that every line break becomes a single
    "\\n" unit, which the layout engine turns into a forced line break.
    A joiner also pulls the character that follows it into the same unit.

    Args:
        text (str): The text to split.

    Returns:
        list[str]: The display units in reading order.
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    units = []
    join_next = False
    for ch in text:
        if units and (join_next or is_combining(ch)) and units[-1] != "\n" and ch != "\n":
            units[-1] += ch
        else:
            units.append(ch)
        join_next = ch == ZERO_WIDTH_JOINER
    return units
