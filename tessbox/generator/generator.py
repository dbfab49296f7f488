"""Generates Tesseract training pages with matching box files.

This module defines `TiffBoxGenerator`, which turns pages of display units
into a multi-page TIFF image and a box file with one line per glyph. Pages are
processed one after the other: each page is laid out, rendered and boxed
before the next one starts, then all pages are written at once.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from loguru import logger
from PIL import ImageFont
from tqdm import tqdm

from tessbox.config.schemas import GeneratorConfig
from tessbox.generator.bounds import GlyphBoundsExtractor
from tessbox.generator.layout import layout_page
from tessbox.generator.rasterizer import render_page
from tessbox.generator.serializer import save_box_file
from tessbox.generator.tiff_writer import save_multipage_tiff

DEFAULT_FILE_NAME = "fontname.exp0"


@dataclass(frozen=True)
class FontSpec:
    """Describes the font the pages are set in.

    Attributes:
        path (str | None): A TrueType or OpenType font file. None selects
            Pillow's built-in scalable font.
        size (float): The nominal font size, before the font scale is applied.
        index (int): The face to load from a font collection file.
    """

    path: Optional[str] = None
    size: float = 12
    index: int = 0

    def load(self, scale=1.0):
        """Loads the font at `size * scale`."""
        size = self.size * scale
        if self.path is None:
            return ImageFont.load_default(size=size)
        return ImageFont.truetype(str(self.path), size=size, index=self.index)


def create_file_name(font):
    """Derives an output base name from a loaded font.

    The family name is lower-cased with spaces removed, and "b" and "i" are
    appended for bold and italic styles, e.g. "Times New Roman Bold Italic"
    becomes "timesnewromanbi".
    """
    family, style = font.getname()
    style = style or ""
    name = (family or "").replace(" ", "").lower()
    if "Bold" in style:
        name += "b"
    if "Italic" in style:
        name += "i"
    return name


class TiffBoxGenerator:
    """Creates a multi-page TIFF image and its box file from pages of text.

    Attributes:
        text_pages (list[list[str]]): The display units of each page.
        font_spec (FontSpec): The nominal font.
        width (int): The nominal page width in pixels.
        height (int): The nominal page height in pixels.
        config (GeneratorConfig): The layout, rendering and output settings.
        output_dir (Path): The folder the files are written to.
        image_pages (list[Image.Image]): The rendered pages of the last run.
        box_pages (list[BoxCollection]): The glyph boxes of the last run.
    """

    def __init__(self, text_pages, font_spec, width, height, config=None):
        self.text_pages = [list(page) for page in text_pages]
        self.font_spec = font_spec
        self.width = width
        self.height = height
        self.config = config if config is not None else GeneratorConfig()
        self.font = font_spec.load(self.config.font_scale)
        self.output_dir = Path(".")
        self._file_name = DEFAULT_FILE_NAME
        self.image_pages = []
        self.box_pages = []

    @property
    def file_name(self):
        """The base name of the output files, without extension."""
        return self._file_name

    @file_name.setter
    def file_name(self, file_name):
        if file_name:
            self._file_name = file_name.rsplit(".", 1)[0] if "." in file_name else file_name

    @property
    def tiff_path(self):
        return Path(self.output_dir) / f"{self.file_name}.tif"

    @property
    def box_path(self):
        return Path(self.output_dir) / f"{self.file_name}.box"

    def generate_pages(self):
        """Lays out, renders and boxes every page.

        Previous results are discarded. Each page is fully processed before
        the next one is laid out.

        Returns:
            tuple[list[Image.Image], list[BoxCollection]]: The page rasters
            and their glyph boxes.
        """
        self.image_pages = []
        self.box_pages = []
        extractor = GlyphBoundsExtractor(self.config)
        page_size = (self.width, self.height)

        for page_index, units in enumerate(tqdm(self.text_pages, desc="Rendering pages", disable=len(self.text_pages) < 2)):
            layout = layout_page(units, self.font, page_size, self.config)
            image = render_page(layout, self.font, self.config)
            boxes = extractor(layout, image, page_index)
            self.image_pages.append(image)
            self.box_pages.append(boxes)
            logger.info(f"Page {page_index}: {len(boxes)} boxes, {image.width}x{image.height} px")

        return self.image_pages, self.box_pages

    def save_multipage_tiff(self):
        return save_multipage_tiff(
            self.image_pages,
            self.tiff_path,
            anti_aliased=self.config.anti_aliased,
            noise_amount=self.config.noise_amount,
            dpi=self.config.tiff_dpi,
        )

    def save_box_file(self):
        return save_box_file(self.box_pages, self.box_path)

    def create(self):
        """Generates all pages and writes the TIFF and box files.

        Returns:
            tuple[Path, Path]: The paths of the TIFF file and the box file.
        """
        Path(self.output_dir).mkdir(parents=True, exist_ok=True)
        self.generate_pages()
        self.save_multipage_tiff()
        self.save_box_file()
        return self.tiff_path, self.box_path
