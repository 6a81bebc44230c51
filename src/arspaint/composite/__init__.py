"""
Composite module for layer rendering and blending.

This subpackage flattens an ordered layer list into a single straight RGBA
framebuffer. It implements the Normal, Multiply, Add and Screen blend modes,
layer opacity and clipping to the layer below.

Key modules:

- :py:mod:`arspaint.composite.composite`: Main compositing functions
- :py:mod:`arspaint.composite.blend`: Blend mode implementations
- :py:mod:`arspaint.composite.utils`: Bounding box and array helpers

Example usage::

    from arspaint import Document
    from arspaint.composite import composite

    document = Document.new((320, 240))
    framebuffer = composite(document.size, document.layers)

The engine is deterministic: compositing an unchanged layer list twice
yields byte-identical output. Documents cache the result and only
recomposite after a mutation.
"""

from arspaint.composite.composite import blend, composite

__all__ = [
    "blend",
    "composite",
]
