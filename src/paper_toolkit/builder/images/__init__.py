"""
Module: builder.images

Purpose:
    Bounded image loading for logos and question figures.
"""

from .loader import AssetError, ImageNotFoundError, load_image

__all__ = [
    "AssetError",
    "ImageNotFoundError",
    "load_image",
]
