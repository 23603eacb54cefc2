"""Image I/O -- decode sources into PixelGrids, resize them, and write files."""

import logging
import os
import threading
import xml.etree.ElementTree as ET
from contextlib import contextmanager
from io import BytesIO
from pathlib import Path

import cv2
import numpy as np
from PIL import Image

from .pixels import PixelGrid

logger = logging.getLogger("mod_pipeline")

_RESIZE_FILTERS = {
    "area": cv2.INTER_AREA,
    "lanczos": cv2.INTER_LANCZOS4,
    "cubic": cv2.INTER_CUBIC,
    "linear": cv2.INTER_LINEAR,
    "nearest": cv2.INTER_NEAREST,
}


class ImageDecodeError(OSError):
    """Raised when raster or vector source bytes cannot be decoded."""


def _grid_from_image(img: Image.Image) -> PixelGrid:
    if img.mode != "RGBA":
        with img.convert("RGBA") as converted:
            arr = np.array(converted, dtype=np.uint8)
    else:
        arr = np.array(img, dtype=np.uint8)
    return PixelGrid.from_array(arr)


def _svg_has_intrinsic_size(data: bytes) -> bool:
    """Return True when the root <svg> declares width/height or a viewBox."""
    try:
        root = ET.fromstring(data)
    except ET.ParseError as exc:
        raise ImageDecodeError(f"Malformed SVG document: {exc}") from exc
    if root.get("viewBox"):
        return True
    return bool(root.get("width")) and bool(root.get("height"))


def rasterize_svg(data: bytes, default_size: int = 512) -> PixelGrid:
    """Rasterize SVG bytes at their intrinsic size, or ``default_size`` square."""
    try:
        import cairosvg
    except (ImportError, OSError) as exc:
        raise ImageDecodeError(
            "SVG support requires cairosvg. Install with: pip install 'ModBrew[svg]'"
        ) from exc

    kwargs = {}
    if not _svg_has_intrinsic_size(data):
        logger.debug("SVG has no intrinsic size; rasterizing at %dx%d",
                     default_size, default_size)
        kwargs = {"output_width": default_size, "output_height": default_size}
    try:
        png_bytes = cairosvg.svg2png(bytestring=data, **kwargs)
    except Exception as exc:
        raise ImageDecodeError(f"Failed to rasterize SVG: {exc}") from exc
    return decode_image(png_bytes)


def decode_image(data: bytes) -> PixelGrid:
    """Decode raster image bytes into an RGBA PixelGrid."""
    try:
        with Image.open(BytesIO(data)) as img:
            img.load()
            return _grid_from_image(img)
    except Exception as exc:
        raise ImageDecodeError(f"Failed to decode image: {exc}") from exc


def load_pixels(path: str, svg_default_size: int = 512) -> PixelGrid:
    """Load an image file (any Pillow raster format or SVG) as a PixelGrid."""
    ext = Path(path).suffix.lower()
    with open(path, "rb") as f:
        data = f.read()
    try:
        if ext == ".svg":
            return rasterize_svg(data, svg_default_size)
        return decode_image(data)
    except ImageDecodeError as exc:
        logger.error("Failed to open image '%s' (ext=%s): %s", path, ext, exc)
        raise ImageDecodeError(f"{path}: {exc}") from exc


def resize_pixels(grid: PixelGrid, width: int, height: int,
                  method: str = "area") -> PixelGrid:
    """Resize a grid to exactly ``width`` x ``height``."""
    if width < 1 or height < 1:
        raise ValueError(f"Target size must be positive, got {width}x{height}")
    interp = _RESIZE_FILTERS.get(method, cv2.INTER_AREA)
    if (width, height) == grid.size:
        return PixelGrid.from_array(grid.pixels.copy())
    resized = cv2.resize(grid.pixels, (width, height), interpolation=interp)
    return PixelGrid.from_array(resized)


@contextmanager
def atomic_output(path: str):
    """Yield a temp path next to ``path``; move it into place on success."""
    ext = os.path.splitext(path)[1]
    tmp_path = f"{path}.tmp.{os.getpid()}.{threading.get_ident()}{ext}"
    try:
        yield tmp_path
        os.replace(tmp_path, path)
    finally:
        if os.path.exists(tmp_path):
            try:
                os.remove(tmp_path)
            except OSError:
                pass


def write_bytes(data: bytes, path: str):
    """Write ``data`` to ``path`` atomically."""
    with atomic_output(path) as tmp_path:
        with open(tmp_path, "wb") as f:
            f.write(data)


def save_png(grid: PixelGrid, path: str):
    """Save a grid as a lossless RGBA PNG."""
    with atomic_output(path) as tmp_path:
        with Image.fromarray(grid.pixels) as img:
            img.save(tmp_path, format="PNG", optimize=True)
    logger.debug("Saved: %s (%dx%d PNG)", path, grid.width, grid.height)
