"""Uncompressed DDS texture container used by the game engine.

The layout is the legacy one the engine loads without complaint: a
128-byte header whose only non-zero fields are the magic, the header
size, and the image dimensions, followed by raw 32-bit pixels in
(A, R, G, B) byte order, rows top-to-bottom. No mipmaps, no compression.
"""

import struct
from dataclasses import dataclass

import numpy as np

from .io import write_bytes
from .pixels import PixelGrid

DDS_MAGIC = b"DDS "
DDS_HEADER_SIZE = 124
DDS_FILE_HEADER_BYTES = 4 + DDS_HEADER_SIZE

# magic, dwSize, dwFlags, dwHeight, dwWidth, dwPitchOrLinearSize, dwDepth,
# dwMipMapCount, dwReserved1[11], DDS_PIXELFORMAT (8 dwords), dwCaps,
# dwCaps2, dwCaps3, dwCaps4, dwReserved2
_HEADER = struct.Struct("<4s31I")
_OFFSET_HEIGHT = 12
_OFFSET_WIDTH = 16
# ARGB channel order taken from an RGBA buffer.
_ARGB = [3, 0, 1, 2]


@dataclass(frozen=True)
class DdsHeader:
    """Fields read back from a DDS header."""

    magic: bytes
    size: int
    flags: int
    height: int
    width: int
    mipmap_count: int

    @property
    def pixel_bytes(self) -> int:
        return self.width * self.height * 4


def build_header(width: int, height: int) -> bytes:
    """Pack the 128-byte header for a ``width`` x ``height`` texture."""
    fields = [0] * 31
    fields[0] = DDS_HEADER_SIZE
    fields[2] = height
    fields[3] = width
    return _HEADER.pack(DDS_MAGIC, *fields)


def encode_pixels(grid: PixelGrid) -> bytes:
    """Return the ARGB pixel body with fully transparent pixels zeroed."""
    rgba = grid.pixels
    transparent = rgba[:, :, 3] == 0
    if transparent.any():
        rgba = rgba.copy()
        rgba[transparent] = 0
    return np.ascontiguousarray(rgba[:, :, _ARGB]).tobytes()


def encode_dds(grid: PixelGrid) -> bytes:
    """Serialize ``grid`` into a complete DDS file image."""
    body = encode_pixels(grid)
    if len(body) != grid.width * grid.height * 4:
        raise ValueError(
            f"Pixel body is {len(body)} bytes, expected "
            f"{grid.width * grid.height * 4} for {grid.width}x{grid.height}"
        )
    return build_header(grid.width, grid.height) + body


def write_dds(grid: PixelGrid, path: str):
    """Encode ``grid`` and write it to ``path`` atomically."""
    write_bytes(encode_dds(grid), path)


def read_dds_header(data: bytes) -> DdsHeader:
    """Parse the fixed header from the start of ``data``."""
    if len(data) < DDS_FILE_HEADER_BYTES:
        raise ValueError(
            f"DDS data too short: {len(data)} bytes < {DDS_FILE_HEADER_BYTES}"
        )
    if data[:4] != DDS_MAGIC:
        raise ValueError(f"Not a DDS file (magic={data[:4]!r})")
    size, flags = struct.unpack_from("<2I", data, 4)
    height = struct.unpack_from("<I", data, _OFFSET_HEIGHT)[0]
    width = struct.unpack_from("<I", data, _OFFSET_WIDTH)[0]
    mip_count = struct.unpack_from("<I", data, 28)[0]
    return DdsHeader(
        magic=data[:4], size=size, flags=flags,
        height=height, width=width, mipmap_count=mip_count,
    )


def decode_dds_pixels(data: bytes) -> PixelGrid:
    """Read an encoded texture back into an RGBA grid (for verification)."""
    header = read_dds_header(data)
    body = data[DDS_FILE_HEADER_BYTES:DDS_FILE_HEADER_BYTES + header.pixel_bytes]
    if len(body) != header.pixel_bytes:
        raise ValueError(
            f"DDS body truncated: {len(body)} of {header.pixel_bytes} bytes"
        )
    argb = np.frombuffer(body, dtype=np.uint8).reshape(header.height, header.width, 4)
    rgba = argb[:, :, [1, 2, 3, 0]]
    return PixelGrid.from_array(rgba)
