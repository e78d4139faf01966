"""Progressive renderer for batched sample accumulation.

ProgressiveRenderer owns the render target dimensions and the depth budget,
and adds samples to the running average in batches, reporting progress
after each batch either through a callback or as a generator.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from spheretrace.core.progressive import ProgressiveRenderer
    >>> from spheretrace.scene.three_spheres import create_three_spheres_scene
    >>> from spheretrace.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_three_spheres_scene()
    >>> setup_camera(camera)
    >>>
    >>> renderer = ProgressiveRenderer(400, 225)
    >>> renderer.render(100, batch_size=10)
    >>> image = renderer.get_image_numpy()
"""

import logging
from collections.abc import Callable, Generator

import numpy as np
import numpy.typing as npt

from spheretrace.core.integrator import (
    MAX_DEPTH,
    clear_render_target,
    get_image_numpy,
    get_total_samples,
    render_image,
    setup_render_target,
)

logger = logging.getLogger(__name__)

# Callback receives (current_samples, target_samples)
ProgressCallback = Callable[[int, int], None]


class ProgressiveRenderer:
    """Accumulates samples per pixel into the shared render target.

    The color buffer itself lives in the integrator's Taichi fields, so only
    one renderer is meaningful at a time.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        max_depth: Depth budget for every traced ray.
    """

    def __init__(self, width: int, height: int, max_depth: int = MAX_DEPTH) -> None:
        """Set up the render target.

        Raises:
            ValueError: If the dimensions are out of the supported range or
                max_depth is negative.
        """
        if max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {max_depth}")

        self._width = width
        self._height = height
        self._max_depth = max_depth
        setup_render_target(width, height)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def max_depth(self) -> int:
        return self._max_depth

    @property
    def sample_count(self) -> int:
        """Number of samples accumulated per pixel so far."""
        return get_total_samples()

    def reset(self) -> None:
        """Discard accumulated samples, keeping the dimensions."""
        clear_render_target()

    def _batches(self, num_samples: int, batch_size: int) -> Generator[tuple[int, int], None, None]:
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")

        target_samples = self.sample_count + num_samples
        remaining = num_samples
        while remaining > 0:
            batch = min(batch_size, remaining)
            render_image(batch, self._max_depth)
            remaining -= batch
            logger.debug("Accumulated %d/%d samples", self.sample_count, target_samples)
            yield self.sample_count, target_samples

    def render(
        self,
        num_samples: int = 1,
        batch_size: int = 1,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Add num_samples samples per pixel.

        Args:
            num_samples: Samples to add. Zero or negative renders nothing.
            batch_size: Samples rendered between callback invocations.
            callback: Called after each batch with (current, target).

        Raises:
            ValueError: If batch_size is not positive.
        """
        for current, target in self._batches(num_samples, batch_size):
            if callback is not None:
                callback(current, target)

    def render_progressive(
        self,
        num_samples: int = 1,
        batch_size: int = 1,
    ) -> Generator[tuple[int, int], None, None]:
        """Generator form of render(), yielding (current, target) per batch.

        Example:
            >>> for current, target in renderer.render_progressive(100, batch_size=10):
            ...     print(f"{current}/{target}")
        """
        yield from self._batches(num_samples, batch_size)

    def get_image_numpy(self) -> npt.NDArray[np.float64]:
        """Linear image of shape (height, width, 3), top row first."""
        return get_image_numpy()

    def __repr__(self) -> str:
        return (
            f"ProgressiveRenderer(width={self.width}, height={self.height}, "
            f"max_depth={self.max_depth}, samples={self.sample_count})"
        )
