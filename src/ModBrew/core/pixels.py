"""In-memory RGBA pixel grid."""

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True, eq=False)
class PixelGrid:
    """Decoded image: ``pixels`` is a (height, width, 4) uint8 RGBA array.

    Rows run top-to-bottom, columns left-to-right.
    """

    width: int
    height: int
    pixels: np.ndarray

    def __post_init__(self) -> None:
        """Reject grids whose buffer disagrees with the declared size."""
        if self.width < 1 or self.height < 1:
            raise ValueError(
                f"PixelGrid dimensions must be positive, got {self.width}x{self.height}"
            )
        expected = (self.height, self.width, 4)
        if self.pixels.shape != expected:
            raise ValueError(
                f"PixelGrid buffer shape {self.pixels.shape} does not match "
                f"declared size {expected}"
            )
        if self.pixels.dtype != np.uint8:
            raise ValueError(f"PixelGrid buffer must be uint8, got {self.pixels.dtype}")

    @classmethod
    def from_array(cls, arr: np.ndarray) -> "PixelGrid":
        """Build a grid from an HxW, HxWx3 or HxWx4 uint8 array."""
        arr = np.asarray(arr, dtype=np.uint8)
        if arr.ndim == 2:
            arr = np.stack([arr, arr, arr], axis=-1)
        if arr.ndim != 3 or arr.shape[-1] not in (3, 4):
            raise ValueError(f"Expected HxW, HxWx3 or HxWx4 array, got shape {arr.shape}")
        if arr.shape[-1] == 3:
            alpha = np.full(arr.shape[:2] + (1,), 255, dtype=np.uint8)
            arr = np.concatenate([arr, alpha], axis=-1)
        h, w = arr.shape[:2]
        return cls(width=w, height=h, pixels=np.ascontiguousarray(arr))

    @property
    def size(self):
        """Return (width, height) in Pillow order."""
        return self.width, self.height
