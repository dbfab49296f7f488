"""Text-line segmentation with Tesseract.

`TesseractLineSegmenter` asks Tesseract for the layout of a page and returns
the boxes of its text lines, which the end-of-line marking uses to find the
last glyph of every line.
"""

import pytesseract

from tessbox.common.boxes import Rect

TEXTLINE_LEVEL = 4
"""The `level` value Tesseract reports for text-line rows in `image_to_data`."""


class TesseractLineSegmenter:
    """Finds text-line regions on a page image.

    Attributes:
        tessdata_dir (str | None): The folder holding Tesseract's language
            data, or None to use Tesseract's default.
        lang (str): The Tesseract language to segment with.
    """

    def __init__(self, tessdata_dir=None, lang="eng"):
        self.tessdata_dir = tessdata_dir
        self.lang = lang

    def _config(self):
        if self.tessdata_dir:
            return f'--tessdata-dir "{self.tessdata_dir}"'
        return ""

    def __call__(self, image):
        """Returns the text-line regions of `image` in Tesseract's order.

        Args:
            image (Image.Image): The page raster.

        Returns:
            list[Rect]: One rectangle per text line, in pixels.
        """
        data = pytesseract.image_to_data(
            image.convert("L"),
            lang=self.lang,
            config=self._config(),
            output_type=pytesseract.Output.DICT,
        )
        regions = []
        for i, level in enumerate(data["level"]):
            if int(level) != TEXTLINE_LEVEL:
                continue
            width, height = int(data["width"][i]), int(data["height"][i])
            if width <= 0 or height <= 0:
                continue
            regions.append(Rect(int(data["left"][i]), int(data["top"][i]), width, height))
        return regions
