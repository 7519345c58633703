"""Decoded raster image with RGBA sampling over rectangles."""

import io
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image


class RasterImage:
    """
    RGBA pixels of a chart screenshot.

    Holds a (height, width, 4) uint8 array. Each analysis run decodes its own
    image, so nothing here is shared between requests.
    """

    def __init__(self, pixels: np.ndarray):
        if pixels.ndim != 3 or pixels.shape[2] != 4:
            raise ValueError(f"Expected an (h, w, 4) RGBA array, got shape {pixels.shape}")
        self._pixels = pixels.astype(np.uint8, copy=False)

    @classmethod
    def from_array(cls, pixels: np.ndarray) -> "RasterImage":
        """Wrap an RGB or RGBA array. RGB input gets a fully opaque alpha channel."""
        if pixels.ndim == 3 and pixels.shape[2] == 3:
            alpha = np.full(pixels.shape[:2] + (1,), 255, dtype=np.uint8)
            pixels = np.concatenate([pixels.astype(np.uint8), alpha], axis=2)
        return cls(pixels)

    @classmethod
    def from_pil(cls, image: Image.Image) -> "RasterImage":
        return cls(np.asarray(image.convert("RGBA")))

    @classmethod
    def open(cls, path: Union[str, Path]) -> "RasterImage":
        with Image.open(path) as img:
            return cls.from_pil(img)

    @classmethod
    def from_bytes(cls, data: bytes) -> "RasterImage":
        with Image.open(io.BytesIO(data)) as img:
            return cls.from_pil(img)

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    @property
    def pixels(self) -> np.ndarray:
        return self._pixels

    def region(self, x0: int, y0: int, x1: int, y1: int) -> np.ndarray:
        """
        RGBA pixels of the rectangle [x0, x1) x [y0, y1), clipped to the image.

        Returns a view; callers must not write to it.
        """
        x0, x1 = max(0, x0), min(self.width, x1)
        y0, y1 = max(0, y0), min(self.height, y1)
        return self._pixels[y0:max(y0, y1), x0:max(x0, x1)]
