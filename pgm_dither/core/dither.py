"""Black/white dithering: fixed, random and ordered thresholds plus
Floyd-Steinberg error diffusion.

Every algorithm returns a new Image whose pixels are all 0 or 255.
"""

from __future__ import annotations

from collections import deque
from enum import Enum
from typing import Callable

import numpy as np

from pgm_dither.core.image import Image, map_fold, map_pixels

BLACK = 0
WHITE = 255


class DitherMethod(str, Enum):
    THRESHOLD = "threshold"
    RANDOM = "random"
    BAYER2 = "bayer2"
    BAYER4 = "bayer4"
    FLOYD_STEINBERG = "floyd-steinberg"


# Rows and columns are indexed by (coordinate mod N).
BAYER_2: tuple[tuple[int, ...], ...] = (
    (0, 127),
    (191, 64),
)

BAYER_4: tuple[tuple[int, ...], ...] = (
    (0, 127, 32, 159),
    (191, 64, 223, 96),
    (48, 175, 16, 143),
    (239, 112, 207, 80),
)


def threshold(image: Image, t: int) -> Image:
    """White where the pixel is strictly brighter than ``t``.

    ``t`` is expected in 0..255 but not checked; values outside that range
    make every pixel land on the same side.
    """
    return map_pixels(image, lambda v, row, col: WHITE if v > t else BLACK)


def make_rng(seed: int | None = None) -> Callable[[], int]:
    """Return a callable drawing uniform integers in [0, 255]."""
    gen = np.random.default_rng(seed)
    return lambda: int(gen.integers(0, 256))


def random_threshold(image: Image, rng: Callable[[], int]) -> Image:
    """Threshold each pixel against a fresh draw from ``rng``."""
    return map_pixels(image, lambda v, row, col: WHITE if v > rng() else BLACK)


def ordered(image: Image, matrix: tuple[tuple[int, ...], ...]) -> Image:
    """Ordered dithering against a square threshold matrix.

    The matrix tiles the image: pixel (row, col) is compared with
    ``matrix[row % n][col % n]``.
    """
    n = len(matrix)
    return map_pixels(
        image,
        lambda v, row, col: WHITE if v > matrix[row % n][col % n] else BLACK,
    )


def bayer2(image: Image) -> Image:
    return ordered(image, BAYER_2)


def bayer4(image: Image) -> Image:
    return ordered(image, BAYER_4)


def window_length(width: int) -> int:
    """Slots needed to reach from the current pixel into the next row."""
    return max(5, width + 1)


def _diffuse(error: int, weight: int) -> int:
    """``error * weight / 16`` truncated toward zero."""
    share = abs(error) * weight // 16
    return share if error >= 0 else -share


def _floyd_step(
    window: deque[int], value: int, row: int, col: int
) -> tuple[deque[int], int]:
    carried = window.popleft()
    window.append(0)

    adjusted = value + carried
    out = WHITE if adjusted > 127 else BLACK
    error = adjusted - out

    b = window.pop()
    c = window.pop()
    d = window.pop()
    a = window.popleft()

    window.appendleft(a + _diffuse(error, 7))
    window.append(d + _diffuse(error, 3))
    window.append(c + _diffuse(error, 5))
    window.append(b + _diffuse(error, 1))
    return window, out


def floyd_steinberg(image: Image) -> Image:
    """Floyd-Steinberg error diffusion using O(width) memory.

    Pending quantization error lives in a sliding window of
    ``max(5, width + 1)`` slots covering the current pixel and the pixels
    that follow it in raster order. Each step consumes the front slot,
    opens a new slot at the back, then spreads the error 7/16 to the next
    pixel and 3/16, 5/16, 1/16 to the three trailing slots, which line up
    with the row below once traversal wraps.
    """
    window: deque[int] = deque([0] * window_length(image.width))
    return map_fold(image, window, _floyd_step)
