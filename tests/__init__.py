"""The tests package for the tessbox project.

The tests are written using the `pytest` framework and cover the generation
pipeline (layout, rendering, bounds extraction and output files), the box
editing operations and the configuration layer.
"""
