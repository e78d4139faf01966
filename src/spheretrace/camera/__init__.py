"""Camera module for primary ray generation.

Components:
    pinhole: Pinhole (perspective) camera with look-at positioning

Ray generation uses normalized viewport coordinates:
    u in [0, 1]: left to right across image
    v in [0, 1]: bottom to top across image
"""

from .pinhole import (
    DEFAULT_ASPECT_RATIO,
    PinholeCamera,
    get_camera_info,
    get_ray,
    setup_camera,
)

__all__ = [
    "PinholeCamera",
    "DEFAULT_ASPECT_RATIO",
    "setup_camera",
    "get_ray",
    "get_camera_info",
]
