"""Image processing pipeline: pick one dithering algorithm and run it."""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from typing import Callable

from pgm_dither.core.dither import (
    DitherMethod,
    bayer2,
    bayer4,
    floyd_steinberg,
    make_rng,
    random_threshold,
    threshold,
)
from pgm_dither.core.image import Image

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    """Processing settings that affect output."""

    method: DitherMethod = DitherMethod.FLOYD_STEINBERG
    threshold: int = 127  # only used by DitherMethod.THRESHOLD
    seed: int | None = None  # only used by DitherMethod.RANDOM

    def __post_init__(self) -> None:
        # Accept plain strings such as "bayer4"; unknown names raise ValueError
        object.__setattr__(self, "method", DitherMethod(self.method))

    def hash(self) -> str:
        """Deterministic hash for cache keying."""
        data = f"{self.method.value}:{self.threshold}:{self.seed}"
        return hashlib.md5(data.encode()).hexdigest()[:12]

    def describe(self) -> dict[str, object]:
        info: dict[str, object] = {"method": self.method.value}
        if self.method == DitherMethod.THRESHOLD:
            info["threshold"] = self.threshold
        elif self.method == DitherMethod.RANDOM:
            info["seed"] = self.seed
        return info


def process_image(
    image: Image,
    settings: Settings,
    rng: Callable[[], int] | None = None,
) -> Image:
    """Dither an image with the algorithm chosen in ``settings``.

    Args:
        image: grayscale input.
        settings: algorithm selection and its parameters.
        rng: random source for DitherMethod.RANDOM. Defaults to one seeded
            from ``settings.seed``.

    Returns:
        New Image of the same size containing only 0 and 255.
    """
    method = settings.method
    logger.debug(
        "Dithering %dx%d image with %s", image.width, image.height, method.value
    )

    if method == DitherMethod.THRESHOLD:
        return threshold(image, settings.threshold)
    if method == DitherMethod.RANDOM:
        return random_threshold(image, rng or make_rng(settings.seed))
    if method == DitherMethod.BAYER2:
        return bayer2(image)
    if method == DitherMethod.BAYER4:
        return bayer4(image)
    return floyd_steinberg(image)
