"""Image export for rendered images.

Linear colors are encoded the same way for every format:

    1. Gamma 2: each channel is replaced by its square root
    2. Clamp to [0, 0.999]
    3. Scale by 256 and truncate to an integer in [0, 255]

Supported formats:
    - PPM (plain-text P3, rows top to bottom)
    - PNG (8-bit RGB via Pillow)

Example:
    >>> from spheretrace.output.export import save_ppm
    >>> from spheretrace.core.progressive import ProgressiveRenderer
    >>>
    >>> renderer = ProgressiveRenderer(400, 225)
    >>> renderer.render(100)
    >>> save_ppm(renderer.get_image_numpy(), "image.ppm")
"""

import logging
import os

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

logger = logging.getLogger(__name__)

# Largest channel value before scaling, keeps 256 * v below 256
CLAMP_MAX = 0.999


def _check_image_shape(image: npt.NDArray[np.floating]) -> None:
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an image of shape (H, W, 3), got {image.shape}")


def image_to_uint8(image: npt.NDArray[np.floating]) -> npt.NDArray[np.uint8]:
    """Encode a linear image of shape (H, W, 3) as 8-bit gamma-2 values.

    Negative channels are treated as zero.

    Raises:
        ValueError: If the image is not of shape (H, W, 3).
    """
    _check_image_shape(image)

    linear = np.maximum(image.astype(np.float64), 0.0)
    encoded = np.clip(np.sqrt(linear), 0.0, CLAMP_MAX)
    return (256.0 * encoded).astype(np.uint8)


def save_ppm(image: npt.NDArray[np.floating], filepath: str | os.PathLike[str]) -> None:
    """Save a linear image as a plain-text PPM (P3) file.

    The header is ``P3``, then ``width height``, then ``255``, followed by
    one ``r g b`` line per pixel, top row first, left to right.
    """
    pixels = image_to_uint8(image)
    height, width, _ = pixels.shape

    with open(filepath, "w", encoding="ascii") as f:
        f.write(f"P3\n{width} {height}\n255\n")
        for row in pixels:
            for r, g, b in row:
                f.write(f"{r} {g} {b}\n")

    logger.info("Saved %dx%d PPM to %s", width, height, filepath)


def save_png(image: npt.NDArray[np.floating], filepath: str | os.PathLike[str]) -> None:
    """Save a linear image as an 8-bit RGB PNG file."""
    pixels = image_to_uint8(image)

    pil_image = PILImage.fromarray(pixels, mode="RGB")
    pil_image.save(filepath)

    logger.info("Saved %dx%d PNG to %s", pixels.shape[1], pixels.shape[0], filepath)


def save_image(image: npt.NDArray[np.floating], filepath: str | os.PathLike[str]) -> None:
    """Save a linear image, choosing the format from the file extension.

    ``.ppm`` writes PPM; anything else goes through Pillow as PNG.
    """
    if os.fspath(filepath).lower().endswith(".ppm"):
        save_ppm(image, filepath)
    else:
        save_png(image, filepath)


def compute_rmse(
    image_a: npt.NDArray[np.floating],
    image_b: npt.NDArray[np.floating],
) -> float:
    """Root mean squared error between two images of the same shape.

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes must match: {image_a.shape} vs {image_b.shape}")

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
