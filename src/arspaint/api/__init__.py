"""
Document model of arspaint.

This subpackage holds the data the tools edit: layers and their payloads,
the layer stack of a canvas, selection masks, and the Pillow adapter that
moves pixels in and out of the program.

Key modules:

- :py:mod:`arspaint.api.layers`: Layer record and its raster, vector and tone payloads
- :py:mod:`arspaint.api.document`: Document class (layer stack and composite cache)
- :py:mod:`arspaint.api.selection`: Selection mask helpers
- :py:mod:`arspaint.api.pil_io`: PIL/Pillow image I/O utilities

Example usage::

    from arspaint.api.document import Document
    from arspaint.api.layers import Layer

    document = Document.open('photo.png')
    document.add_layer(Layer.new_raster(document.width, document.height, "Ink"))
    document.set_opacity(1, 0.5)
    document.save('flat.png')
"""
