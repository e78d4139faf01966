"""Output module for encoding and saving rendered images.

Components:
    export: Gamma encoding and PPM/PNG writers
"""

from .export import compute_rmse, image_to_uint8, save_image, save_png, save_ppm

__all__ = [
    "image_to_uint8",
    "save_ppm",
    "save_png",
    "save_image",
    "compute_rmse",
]
