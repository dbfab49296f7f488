"""Renders page layouts to raster images.

A page is drawn in black on a white RGB canvas at the working size, resampled
if an image scale other than 1.0 is configured, and finally reduced to the bit
depth that will be written to the TIFF file: 8-bit grayscale when
anti-aliasing is enabled, strict black and white otherwise.
"""

import cv2
import numpy as np
from PIL import Image, ImageDraw

from tessbox.config.schemas import DEFAULT_IMAGE_SCALE, GeneratorConfig
from tessbox.generator.layout import INK_THRESHOLD, PageLayout



def resize_image(image, new_width, new_height):
    """Resamples an image to the given size with Lanczos interpolation."""
    arr = np.asarray(image)
    resized = cv2.resize(arr, (int(new_width), int(new_height)), interpolation=cv2.INTER_LANCZOS4)
    return Image.fromarray(resized)


def reduce_bit_depth(image, anti_aliased):
    """Converts a rendered page to "L" or to "1" mode.

    The bitonal conversion thresholds every pixel at mid gray instead of
    dithering, so each pixel ends up pure black or pure white.
    """
    gray = image.convert("L")
    if anti_aliased:
        return gray
    return gray.point(lambda p: 255 if p > 255 - INK_THRESHOLD else 0).convert("1", dither=Image.Dither.NONE)


def draw_page(layout: PageLayout, font):
    """Draws the text nodes of a layout on a white RGB canvas."""
    image = Image.new("RGB", (layout.width, layout.height), "white")
    draw = ImageDraw.Draw(image)
    for node in layout.text_nodes:
        if node.ink is None:
            continue
        draw.text(node.origin, node.text, font=font, fill="black", anchor="ls")
    return image


def render_page(layout: PageLayout, font, config: GeneratorConfig = None):
    """Renders a page layout to the raster that is written and boxed.

    Args:
        layout (PageLayout): The laid-out page.
        font (ImageFont.FreeTypeFont): The font at the working size.
        config (GeneratorConfig, optional): The generator settings.

    Returns:
        Image.Image: The page in "L" mode if anti-aliased, else in "1" mode.
    """
    if config is None:
        config = GeneratorConfig()
    image = draw_page(layout, font)
    if config.image_scale != DEFAULT_IMAGE_SCALE:
        width = int(image.width * config.image_scale)
        height = int(image.height * config.image_scale)
        image = resize_image(image, width, height)
    return reduce_bit_depth(image, config.anti_aliased)
