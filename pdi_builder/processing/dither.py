from __future__ import annotations

from functools import lru_cache
from typing import Tuple

from PIL import Image

from ..config import DITHER_ORDERS

Matrix = Tuple[Tuple[int, ...], ...]


@lru_cache(maxsize=None)
def bayer_matrix(order: int) -> Matrix:
    """Return the ``order`` x ``order`` Bayer index matrix (values 0..order²-1)."""
    if order not in DITHER_ORDERS:
        raise ValueError(f"Unsupported Bayer order {order}; expected one of {DITHER_ORDERS}")
    matrix: Matrix = ((0, 2), (3, 1))
    size = 2
    while size < order:
        top = tuple(
            tuple(4 * v for v in row) + tuple(4 * v + 2 for v in row) for row in matrix
        )
        bottom = tuple(
            tuple(4 * v + 3 for v in row) + tuple(4 * v + 1 for v in row) for row in matrix
        )
        matrix = top + bottom
        size *= 2
    return matrix


@lru_cache(maxsize=None)
def threshold_table(order: int) -> Matrix:
    scale = 256.0 / (order * order)
    return tuple(tuple(int((value + 0.5) * scale) for value in row) for row in bayer_matrix(order))


def ordered_bw_dither(img: Image.Image, order: int = 4) -> Image.Image:
    """Quantize ``img`` to pure black and white with an ordered Bayer pattern.

    Returns an ``L`` image whose pixels are only 0 or 255. Output is fully
    determined by the input pixels and position, so the pattern tiles cleanly.
    """
    img = img.convert("L")
    table = threshold_table(order)
    mask = order - 1
    width, height = img.size
    src = img.load()
    out = Image.new("L", (width, height))
    dst = out.load()
    for y in range(height):
        row = table[y & mask]
        for x in range(width):
            dst[x, y] = 255 if src[x, y] > row[x & mask] else 0
    return out


def to_one_bit(img: Image.Image) -> Image.Image:
    # Values are already 0/255, so disable Pillow's own dithering.
    return img.convert("1", dither=Image.Dither.NONE)
