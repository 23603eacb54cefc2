"""Core utilities -- re-exports all public symbols for convenience."""

from .pixels import PixelGrid
from .io import (
    ImageDecodeError,
    decode_image,
    load_pixels,
    rasterize_svg,
    resize_pixels,
    save_png,
    write_bytes,
)
from .dds import encode_dds, write_dds, read_dds_header, decode_dds_pixels, DdsHeader
from .ignore import IgnoreRules, IGNORE_FILE_NAME
from .descriptor import (
    rewrite_descriptor, read_descriptor_value, DESCRIPTOR_FILE_NAME, DEV_SUFFIX,
)
from .flags import FLAG_SIZES, generate_flag_artifacts, is_flag_path, flag_destination
from .paths import (
    PathStructureError, normalize_rel_path, get_output_path, ensure_parent_dir, is_within,
)
from .records import BuildRun, BuildReport
from .router import FileKind, classify, transform_file
from .logging import setup_logging

__all__ = [
    "PixelGrid",
    "ImageDecodeError", "decode_image", "load_pixels", "rasterize_svg",
    "resize_pixels", "save_png", "write_bytes",
    "encode_dds", "write_dds", "read_dds_header", "decode_dds_pixels", "DdsHeader",
    "IgnoreRules", "IGNORE_FILE_NAME",
    "rewrite_descriptor", "read_descriptor_value", "DESCRIPTOR_FILE_NAME", "DEV_SUFFIX",
    "FLAG_SIZES", "generate_flag_artifacts", "is_flag_path", "flag_destination",
    "PathStructureError", "normalize_rel_path", "get_output_path",
    "ensure_parent_dir", "is_within",
    "BuildRun", "BuildReport",
    "FileKind", "classify", "transform_file",
    "setup_logging",
]
