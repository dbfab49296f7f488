"""The tessbox package generates and edits Tesseract box-file training data.

The package is split into a generation side, which lays out text, renders it
to multi-page TIFF images and extracts one bounding box per glyph, and an
editing side, which merges, splits, inserts, deletes and end-of-line marks
the boxes of already generated pages.

Example:
    >>> from tessbox import TiffBoxGenerator, FontSpec
    >>> generator = TiffBoxGenerator([["a", "b"]], FontSpec(size=12), 2550, 3300)
    >>> generator.output_dir = "out"
    >>> generator.create()
"""

from ._version import __version__ as __version__
from tessbox.generator.generator import FontSpec as FontSpec
from tessbox.generator.generator import TiffBoxGenerator as TiffBoxGenerator
