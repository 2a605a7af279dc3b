"""Grayscale bitmap model and row-major pixel traversal.

Coordinates handed to traversal callbacks are 1-based: ``row`` runs
1..height and ``column`` runs 1..width within each row.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, TypeVar

import numpy as np

S = TypeVar("S")


@dataclass(frozen=True)
class Image:
    """An 8-bit grayscale bitmap stored row-major."""

    width: int
    height: int
    pixels: bytes

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Image dimensions must be positive, got {self.width}x{self.height}"
            )
        if isinstance(self.pixels, int):
            raise TypeError("pixels must be a sequence of ints, not int")
        if not isinstance(self.pixels, bytes):
            object.__setattr__(self, "pixels", bytes(self.pixels))
        expected = self.width * self.height
        if len(self.pixels) != expected:
            raise ValueError(
                f"Expected {expected} pixels for {self.width}x{self.height}, "
                f"got {len(self.pixels)}"
            )

    @classmethod
    def filled(cls, width: int, height: int, value: int) -> Image:
        """Build a constant-valued image."""
        return cls(width, height, bytes([value]) * (width * height))

    @classmethod
    def from_array(cls, arr: np.ndarray) -> Image:
        """Build an image from a 2D array of shape (height, width)."""
        if arr.ndim != 2:
            raise ValueError(f"Expected a 2D grayscale array, got shape {arr.shape}")
        h, w = arr.shape
        data = np.clip(arr, 0, 255).astype(np.uint8)
        return cls(w, h, data.tobytes())

    def to_array(self) -> np.ndarray:
        """Return the pixels as a (height, width) uint8 array."""
        return np.frombuffer(self.pixels, dtype=np.uint8).reshape(
            self.height, self.width
        ).copy()

    def pixel(self, row: int, column: int) -> int:
        """Value at 1-based (row, column)."""
        return self.pixels[(row - 1) * self.width + (column - 1)]

    def rows(self) -> Iterator[bytes]:
        for start in range(0, len(self.pixels), self.width):
            yield self.pixels[start : start + self.width]


def map_pixels(image: Image, f: Callable[[int, int, int], int]) -> Image:
    """Replace every pixel with ``f(value, row, column)``, in row-major order."""
    w = image.width
    out = bytearray(len(image.pixels))
    for i, value in enumerate(image.pixels):
        row, col = divmod(i, w)
        out[i] = f(value, row + 1, col + 1)
    return Image(image.width, image.height, bytes(out))


def map_fold(
    image: Image,
    initial_state: S,
    f: Callable[[S, int, int, int], tuple[S, int]],
) -> Image:
    """Row-major map that threads an accumulator from pixel to pixel.

    ``f(state, value, row, column)`` returns ``(new_state, new_value)``;
    each step receives the state produced by the previous one. The final
    state is dropped.
    """
    w = image.width
    out = bytearray(len(image.pixels))
    state = initial_state
    for i, value in enumerate(image.pixels):
        row, col = divmod(i, w)
        state, out[i] = f(state, value, row + 1, col + 1)
    return Image(image.width, image.height, bytes(out))
