"""Writes the page rasters as one multi-page TIFF file.

Bitonal pages are compressed with CCITT Group 4, the fax scheme Tesseract
training data traditionally uses. As soon as pages carry gray levels, because
anti-aliasing is enabled or noise was added, LZW compression is used instead.
"""

from pathlib import Path

from loguru import logger

from tessbox.common.image_augmentations import add_noise

COMPRESSION_BITONAL = "group4"
COMPRESSION_GRAY = "tiff_lzw"


def choose_compression(anti_aliased, noise_amount):
    """Returns the Pillow TIFF compression name for the given page settings."""
    if anti_aliased or noise_amount != 0:
        return COMPRESSION_GRAY
    return COMPRESSION_BITONAL


def merge_tiff(images, path, compression, dpi=300):
    """Encodes a list of images into a single multi-page TIFF."""
    images = list(images)
    if not images:
        raise ValueError("Cannot write a TIFF file without pages")
    first, rest = images[0], images[1:]
    first.save(
        path,
        format="TIFF",
        save_all=True,
        append_images=rest,
        compression=compression,
        dpi=(dpi, dpi),
    )


def save_multipage_tiff(images, path, anti_aliased=False, noise_amount=0, dpi=300, rng=None):
    """Writes all pages to `path`, replacing any existing file.

    Noise is added to every page first when `noise_amount` is not zero. The
    source images are not modified. Failures are logged and swallowed; the
    file may then be missing or partially written.

    Args:
        images (list[Image.Image]): The page rasters in page order.
        path (str or Path): The target TIFF file.
        anti_aliased (bool): Whether the pages are 8-bit grayscale.
        noise_amount (int): The noise strength, 0 for none.
        dpi (float): The pixel density recorded in the file.
        rng (np.random.Generator, optional): Random source for the noise.

    Returns:
        bool: True if the file was written, False otherwise.
    """
    try:
        path = Path(path)
        if path.exists():
            path.unlink()
        images = list(images)
        if noise_amount != 0:
            images = [add_noise(image, noise_amount, rng=rng) for image in images]
        compression = choose_compression(anti_aliased, noise_amount)
        if compression == COMPRESSION_BITONAL:
            images = [image.convert("1") for image in images]
        merge_tiff(images, path, compression, dpi=dpi)
        logger.info(f"Saved {len(images)} page(s) to {path} ({compression})")
        return True
    except Exception as e:
        logger.exception(f"Failed to write TIFF file {path}: {e}")
        return False
