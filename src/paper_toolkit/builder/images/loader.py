"""
Module: builder.images.loader

Purpose:
    Bounded, read-only loading of logo and question images. Files are
    checked for existence and size before Pillow decodes them, so a
    request cannot make the service buffer an arbitrarily large file.
    With an asset root, paths are resolved against it and anything that
    lands outside it is refused.

Key Functions:
    - load_image(): Open and fully decode an image

Key Classes:
    - ImageNotFoundError: File missing
    - AssetError: File missing, too large or unreadable

Dependencies:
    - PIL: Image decoding

Used By:
    - builder.blocks.header: Logo
    - builder.blocks.questions: Question images
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)


class AssetError(Exception):
    """Optional asset could not be used."""


class ImageNotFoundError(AssetError):
    """Image file does not exist."""


def load_image(
    path: str | Path,
    max_bytes: int,
    root: Optional[str | Path] = None,
) -> Image.Image:
    """
    Load an image from disk.

    Args:
        path: Image path (relative paths resolve against ``root``, or the
            working directory when no root is given)
        max_bytes: Largest file size that will be read
        root: Directory the image must lie in

    Returns:
        Decoded PIL Image (file handle already closed)

    Raises:
        ImageNotFoundError: If the file does not exist
        AssetError: If the file is outside ``root``, too large or cannot be decoded
    """
    if root is None:
        resolved = Path(path).expanduser().resolve()
    else:
        base = Path(root).expanduser().resolve()
        resolved = (base / path).resolve()
        if not resolved.is_relative_to(base):
            raise AssetError(f"Image outside asset root {base}: {path}")
    if not resolved.is_file():
        raise ImageNotFoundError(f"Image not found: {resolved}")

    try:
        size = resolved.stat().st_size
    except OSError as e:
        raise AssetError(f"Cannot stat image {resolved}: {e}") from e
    if size > max_bytes:
        raise AssetError(f"Image too large ({size} bytes > {max_bytes}): {resolved}")

    try:
        with Image.open(resolved) as img:
            img.load()
            loaded = img.copy()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise AssetError(f"Image unreadable: {resolved}: {e}") from e

    logger.debug(f"Loaded image {resolved.name} {loaded.size[0]}x{loaded.size[1]}")
    return loaded
