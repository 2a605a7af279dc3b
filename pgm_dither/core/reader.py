"""Decoding of binary grayscale (P5) images.

Only the strict header layout ``P5\\n<width> <height>\\n255\\n`` is accepted:
no comments, no alternate whitespace, no maxval other than 255.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

from pgm_dither.core.image import Image

logger = logging.getLogger(__name__)

MAGIC = b"P5\n"
MAXVAL = b"\n255\n"

_DIGITS = frozenset(b"0123456789")
_SPACE = ord(" ")


class DecodeError(ValueError):
    """Raised when bytes are not a valid P5 image."""

    def __init__(self, message: str, offset: int) -> None:
        super().__init__(f"{message} at byte {offset}")
        self.offset = offset


class _State(str, Enum):
    MAGIC = "magic"
    WIDTH = "width"
    HEIGHT = "height"
    MAXVAL = "maxval"


def _parse_header(data: bytes) -> tuple[int, int, int]:
    """Run the header state machine.

    Returns (width, height, offset of the first pixel byte).
    """
    state = _State.MAGIC
    matched = 0  # bytes of the current literal consumed so far
    width = 0
    height = 0
    digits = 0

    for offset, byte in enumerate(data):
        if state is _State.MAGIC:
            if byte != MAGIC[matched]:
                raise DecodeError("Bad magic number", offset)
            matched += 1
            if matched == len(MAGIC):
                state = _State.WIDTH

        elif state is _State.WIDTH:
            if byte in _DIGITS:
                width = width * 10 + (byte - 48)
                digits += 1
            elif byte == _SPACE and digits:
                state = _State.HEIGHT
                digits = 0
            else:
                raise DecodeError("Expected digit or space in width", offset)

        elif state is _State.HEIGHT:
            if byte in _DIGITS:
                height = height * 10 + (byte - 48)
                digits += 1
            elif byte == MAXVAL[0] and digits:
                state = _State.MAXVAL
                matched = 1
            else:
                raise DecodeError("Expected digit or newline in height", offset)

        else:
            if byte != MAXVAL[matched]:
                raise DecodeError("Expected maxval 255", offset)
            matched += 1
            if matched == len(MAXVAL):
                return width, height, offset + 1

    raise DecodeError(f"Truncated header in {state.value}", len(data))


def decode_pgm(data: bytes) -> Image:
    """Decode a P5 byte buffer into an Image.

    Raises:
        DecodeError: if the header does not match the expected grammar,
            a dimension is zero, or the pixel byte count differs from
            width * height.
    """
    width, height, start = _parse_header(data)
    if width == 0 or height == 0:
        raise DecodeError(f"Empty image {width}x{height}", start)

    pixels = bytes(data[start:])
    expected = width * height
    if len(pixels) != expected:
        raise DecodeError(
            f"Expected {expected} pixel bytes for {width}x{height}, "
            f"got {len(pixels)}",
            start,
        )

    logger.debug("Decoded %dx%d image (%d pixel bytes)", width, height, expected)
    return Image(width, height, pixels)


def open_image(path: str | Path) -> Image:
    """Read and decode a P5 file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    return decode_pgm(path.read_bytes())
