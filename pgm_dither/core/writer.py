"""Save dithered images as P5 bytes or through Pillow."""

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image as PILImage

from pgm_dither.core.image import Image
from pgm_dither.core.reader import MAGIC, MAXVAL

logger = logging.getLogger(__name__)

# Output formats delegated to Pillow, keyed by file suffix
PILLOW_FORMATS = {
    ".png": "PNG",
    ".bmp": "BMP",
    ".gif": "GIF",
    ".tif": "TIFF",
    ".tiff": "TIFF",
}


def encode_pgm(image: Image) -> bytes:
    """Serialize an Image in the same strict P5 layout the reader accepts."""
    header = MAGIC + f"{image.width} {image.height}".encode("ascii") + MAXVAL
    return header + image.pixels


def to_pil(image: Image) -> PILImage.Image:
    """Convert to a mode "L" PIL image."""
    return PILImage.fromarray(image.to_array())


def save_output(image: Image, output_path: Path) -> None:
    """Save in the format determined by the output file extension."""
    output_path = Path(output_path)
    suffix = output_path.suffix.lower()
    if suffix == ".pgm":
        output_path.write_bytes(encode_pgm(image))
    elif suffix in PILLOW_FORMATS:
        to_pil(image).save(str(output_path), format=PILLOW_FORMATS[suffix])
    else:
        raise ValueError(f"Unsupported output format: {suffix}")
    logger.debug("Saved %dx%d image to %s", image.width, image.height, output_path)
