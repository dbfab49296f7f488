class InvalidSelection(Exception):
    """Raised when an edit operation is given the wrong number of boxes.

    The message is meant to be shown to the user as-is. Operations raise it
    before touching the box collection, so catching it never leaves a page
    half edited.
    """
    pass


class EditorBusy(Exception):
    """Raised when an interactive edit is attempted while a background job runs."""
    pass


class DegenerateBox(Exception):
    """Raised when a tightened glyph box ends up with no width or no height.

    The bounds extractor catches it, logs a warning and drops the glyph, so
    a single bad glyph never stops the generation of a page.
    """

    def __init__(self, rect, text=""):
        self.rect = rect
        self.text = text
        super().__init__(f"ILL-Bounds: {rect} of text: {text!r}")
