"""Image augmentation functions for the generated page images.

The generator can degrade its clean renderings with noise so the training
data resembles scanned pages more closely. The functions here work on Pillow
images and always return a new image.
"""

import numpy as np
from PIL import Image


def add_noise(image, amount, rng=None):
    """Adds Gaussian noise to a page image.

    The image is converted to 8-bit grayscale first, so a bitonal page comes
    back as a grayscale one. The noise is zero-mean with a standard deviation
    of `amount` gray levels.

    Args:
        image (Image.Image): The page image.
        amount (int): The strength of the noise. Zero returns an unchanged
            grayscale copy.
        rng (np.random.Generator, optional): The random generator to draw
            from. A fresh default generator is used if omitted.

    Returns:
        Image.Image: The noisy image in "L" mode.
    """
    gray = np.asarray(image.convert("L"), dtype=np.float32)
    if amount <= 0:
        return Image.fromarray(gray.astype(np.uint8))
    if rng is None:
        rng = np.random.default_rng()
    noisy = gray + rng.normal(0.0, float(amount), size=gray.shape)
    return Image.fromarray(np.clip(noisy, 0, 255).astype(np.uint8))
