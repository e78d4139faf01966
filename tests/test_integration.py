"""Integration tests for the end-to-end rendering pipeline.

Tests are designed to be fast (low resolution, few samples) while still
exercising scene building, camera setup, rendering and export.

Note: Imports are done inside test methods to avoid Taichi initialization issues.
The conftest.py fixture initializes Taichi before tests run.
"""

from __future__ import annotations

import numpy as np
from PIL import Image as PILImage


def _render_three_spheres(width: int = 48, height: int = 27, samples: int = 4):
    from spheretrace.camera.pinhole import setup_camera
    from spheretrace.core.progressive import ProgressiveRenderer
    from spheretrace.scene.three_spheres import create_three_spheres_scene

    _, camera = create_three_spheres_scene(aspect_ratio=width / height)
    setup_camera(camera)

    renderer = ProgressiveRenderer(width, height, max_depth=10)
    renderer.render(samples, batch_size=2)
    return renderer.get_image_numpy()


class TestThreeSpheresIntegration:
    """End-to-end rendering of the demo scene."""

    def test_renders_finite_non_negative_image(self) -> None:
        image = _render_three_spheres()

        assert image.shape == (27, 48, 3)
        assert np.all(np.isfinite(image))
        assert image.min() >= 0.0
        assert image.max() <= 1.0 + 1e-12

    def test_layout(self) -> None:
        """Sky on top, yellowish ground below, blue sphere in the middle."""
        image = _render_three_spheres(samples=8)
        height, width, _ = image.shape

        sky = image[0].mean(axis=0)
        ground = image[-1].mean(axis=0)
        center = image[height // 2 - 1 : height // 2 + 2, width // 2 - 1 : width // 2 + 2].mean(axis=(0, 1))

        # Sky is bluest at the top
        assert sky[2] > sky[0]
        # The ground albedo has no blue, and only the ground is below
        assert ground[2] < ground[0]
        # The center sphere is blue
        assert center[2] > center[0]

    def test_export_ppm_and_png(self, tmp_path) -> None:
        from spheretrace.output.export import save_png, save_ppm

        image = _render_three_spheres(width=24, height=14, samples=2)
        save_ppm(image, tmp_path / "image.ppm")
        save_png(image, tmp_path / "image.png")

        lines = (tmp_path / "image.ppm").read_text().splitlines()
        assert lines[:3] == ["P3", "24 14", "255"]
        assert len(lines) == 3 + 24 * 14

        with PILImage.open(tmp_path / "image.png") as loaded:
            assert loaded.size == (24, 14)
            first = np.asarray(loaded)[0, 0].tolist()
        assert " ".join(str(v) for v in first) == lines[3]
