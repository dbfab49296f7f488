"""Pydantic schemas for type-safe generator configuration.

This module defines the settings that drive the box generation pipeline. The
three scale factors (font scale, image scale and TIFF density) used to be
process-wide tunables; here they are plain fields of one `GeneratorConfig`
value that is passed explicitly to every stage of the pipeline.
"""

from typing import Tuple

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_FONT_SCALE = 4.0
DEFAULT_IMAGE_SCALE = 1.0
DEFAULT_TIFF_DPI = 300.0


class TighteningConfig(BaseModel):
    """Scan windows for pixel tightening of glyph boxes.

    Each window is a pair of offsets, relative to the pre-scan edge, of the
    first and last row or column probed for black pixels. The values are
    tuned to the bias of one rendering engine and may need recalibration
    for another.
    """

    left: Tuple[int, int] = Field((-1, 2), description="Columns probed for the left edge, scanning rightwards.")
    right: Tuple[int, int] = Field((1, -4), description="Columns probed for the right edge, scanning leftwards.")
    top: Tuple[int, int] = Field((-2, 4), description="Rows probed for the top edge, scanning downwards.")
    bottom: Tuple[int, int] = Field((1, -4), description="Rows probed for the bottom edge, scanning upwards.")
    top_bias: int = Field(1, description="Pixels the final top edge is raised by, growing the height by the same amount.")

    @field_validator("left", "top")
    def validate_forward_window(cls, v: Tuple[int, int]) -> Tuple[int, int]:
        if v[0] > v[1]:
            raise ValueError(f"window {v} must run forwards (start <= end)")
        return v

    @field_validator("right", "bottom")
    def validate_backward_window(cls, v: Tuple[int, int]) -> Tuple[int, int]:
        if v[0] < v[1]:
            raise ValueError(f"window {v} must run backwards (start >= end)")
        return v


class GeneratorConfig(BaseSettings):
    """Configuration for page layout, rendering and output encoding.

    Values can be overridden with environment variables prefixed with
    `TESSBOX_`, for example `TESSBOX_IMAGE_SCALE=0.5` or
    `TESSBOX_TIGHTENING__TOP_BIAS=0`.
    """

    model_config = SettingsConfigDict(env_prefix="TESSBOX_", env_nested_delimiter="__", extra="ignore")

    font_scale: float = Field(DEFAULT_FONT_SCALE, description="Factor the nominal font size is inflated by for layout.")
    image_scale: float = Field(DEFAULT_IMAGE_SCALE, description="Factor the rendered page is resampled by.")
    tiff_dpi: float = Field(DEFAULT_TIFF_DPI, description="Pixel density written to the TIFF file.")
    tracking: float = Field(0.1, ge=0, description="Inter-glyph spacing as a fraction of the working font size.")
    margin: int = Field(100, ge=0, description="Nominal page margin in pixels.")
    leading: int = Field(12, ge=0, description="Nominal extra line spacing in pixels.")
    line_spacing_adjustment: int = Field(4, description="Constant added to the scaled leading.")
    anti_aliased: bool = Field(False, description="Write 8-bit grayscale pages instead of bitonal ones.")
    noise_amount: int = Field(0, ge=0, description="Strength of the noise added to each page; 0 disables it.")
    tightening: TighteningConfig = Field(default_factory=TighteningConfig)

    @field_validator("font_scale")
    def reset_font_scale(cls, v: float) -> float:
        """A non-positive font scale resets to the default."""
        return DEFAULT_FONT_SCALE if v <= 0 else v

    @field_validator("image_scale")
    def reset_image_scale(cls, v: float) -> float:
        """A non-positive image scale resets to the default."""
        return DEFAULT_IMAGE_SCALE if v <= 0 else v

    @field_validator("tiff_dpi")
    def reset_tiff_dpi(cls, v: float) -> float:
        """A non-positive density resets to the default."""
        return DEFAULT_TIFF_DPI if v <= 0 else v

    @property
    def layout_scale(self) -> float:
        """The factor page dimensions, margin and leading are inflated by."""
        return self.font_scale / DEFAULT_FONT_SCALE
