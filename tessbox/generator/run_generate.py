"""Command-line entry point for generating TIFF/box training pairs.

Example:
    python -m tessbox sample.txt out --font_path=fonts/Arial.ttf --font_size=12
"""

from pathlib import Path

import fire
from loguru import logger

from tessbox.common.utils import split_into_units
from tessbox.config import load_config
from tessbox.generator.generator import FontSpec, TiffBoxGenerator, create_file_name
from tessbox.generator.layout import paginate

CONFIG_OVERRIDES = (
    "anti_aliased",
    "noise_amount",
    "tracking",
    "margin",
    "leading",
    "image_scale",
    "font_scale",
    "tiff_dpi",
)


def build_config(config_path=None, **overrides):
    """Loads the configuration and applies the options given on the command line.

    Options left at None keep the value from the file or the environment.
    """
    config = load_config(Path(config_path) if config_path else None)
    updates = {key: value for key, value in overrides.items() if value is not None}
    if not updates:
        return config
    return config.model_validate({**config.model_dump(), **updates})


def run(
    text_path,
    output_dir=".",
    font_path=None,
    font_size=12,
    width=2550,
    height=3300,
    file_name=None,
    prefix="",
    config_path=None,
    anti_aliased=None,
    noise_amount=None,
    tracking=None,
    margin=None,
    leading=None,
    image_scale=None,
    font_scale=None,
    tiff_dpi=None,
):
    """Generates a multi-page TIFF image and its box file from a text file.

    The text is split into display units, broken into pages that fit the
    page size, and rendered with the given font.

    Args:
        text_path (str): The UTF-8 text file to render.
        output_dir (str, optional): The folder to write the files to.
            Defaults to the current directory.
        font_path (str, optional): The font file. Defaults to Pillow's
            built-in font.
        font_size (float, optional): The nominal font size. Defaults to 12.
        width (int, optional): The nominal page width in pixels. Defaults to
            2550 (8.5 inches at 300 dpi).
        height (int, optional): The nominal page height in pixels. Defaults
            to 3300 (11 inches at 300 dpi).
        file_name (str, optional): The output file name; its extension is
            dropped. Defaults to a name derived from the font, e.g.
            "arialb.exp0".
        prefix (str, optional): Prepended to the derived file name, e.g.
            "eng." for "eng.arial.exp0".
        config_path (str, optional): A YAML configuration file. Defaults to
            the packaged configuration.
        anti_aliased, noise_amount, tracking, margin, leading, image_scale,
        font_scale, tiff_dpi: Override the corresponding configuration value.

    Returns:
        tuple[str, str]: The paths of the written TIFF and box files.
    """
    overrides = dict(
        anti_aliased=anti_aliased,
        noise_amount=noise_amount,
        tracking=tracking,
        margin=margin,
        leading=leading,
        image_scale=image_scale,
        font_scale=font_scale,
        tiff_dpi=tiff_dpi,
    )
    config = build_config(config_path, **overrides)

    text = Path(text_path).read_text(encoding="utf-8")
    font_spec = FontSpec(path=font_path, size=float(font_size))
    font = font_spec.load(config.font_scale)
    pages = paginate(split_into_units(text), font, (int(width), int(height)), config)
    if not pages:
        raise ValueError(f"No text to render in {text_path}")
    logger.info(f"Rendering {len(pages)} page(s) from {text_path}")

    generator = TiffBoxGenerator(pages, font_spec, int(width), int(height), config)
    generator.output_dir = Path(output_dir)
    generator.file_name = file_name or f"{prefix}{create_file_name(font)}.exp0.tif"
    tiff_path, box_path = generator.create()
    return str(tiff_path), str(box_path)


if __name__ == "__main__":
    fire.Fire(run)
