"""
Blend mode implementations.

Colors are straight (non-premultiplied) channel values in the 0-255 range.
``Cb`` is the backdrop and ``Cs`` the source color.
"""

import numpy as np

from arspaint.constants import BlendMode


# Separable blend functions
def normal(Cb, Cs):
    return Cs


def multiply(Cb, Cs):
    return Cb * Cs / 255.0


def add(Cb, Cs):
    return np.minimum(Cb + Cs, 255.0)


def screen(Cb, Cs):
    return 255.0 * (1.0 - (1.0 - Cs / 255.0) * (1.0 - Cb / 255.0))


BLEND_FUNC = {
    BlendMode.NORMAL: normal,
    BlendMode.MULTIPLY: multiply,
    BlendMode.ADD: add,
    BlendMode.SCREEN: screen,
}
