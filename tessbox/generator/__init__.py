"""A package for generating Tesseract training images and box files.

This package contains the stages of the generation pipeline: laying out text
into pages, rendering the pages to rasters, extracting tightened glyph boxes
and writing the multi-page TIFF image and the box file.
"""
