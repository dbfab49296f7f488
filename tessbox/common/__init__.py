"""Shared building blocks for the generator and the editor.

This package holds the geometry and box data model, the exceptions raised
across the project, text splitting helpers and image augmentations.
"""
