"""Interactive correction of generated glyph boxes.

This package contains the edit operations (merge, split, insert, delete and
end-of-line marking), the command dispatcher a user interface drives them
through, and the Tesseract text-line segmenter used to find line ends.
"""
