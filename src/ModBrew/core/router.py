"""Per-file dispatch: decide what a source path becomes in the build tree.

Every relative path takes exactly one branch:

1. SKIP        the ignore file itself, or anything the ignore rules match
2. FLAG        images below the flags directory -> three resized DDS files
   THUMBNAIL   images named ``thumbnail`` -> re-encoded PNG
   TEXTURE     any other image -> one DDS file
3. DESCRIPTOR  the mod descriptor -> rewritten with the build path
4. COPY        everything else -> byte-for-byte copy
"""

import logging
import os
import shutil
from enum import Enum
from typing import List

from .dds import write_dds
from .descriptor import rewrite_descriptor
from .flags import generate_flag_artifacts, is_flag_path
from .io import load_pixels, resize_pixels, save_png, write_bytes
from .paths import ensure_parent_dir, get_output_path, normalize_rel_path, split_ext
from .records import BuildRun

logger = logging.getLogger("mod_pipeline")


class FileKind(Enum):
    """Enumerate the transform branches."""

    SKIP = "skip"
    FLAG = "flag"
    THUMBNAIL = "thumbnail"
    TEXTURE = "texture"
    DESCRIPTOR = "descriptor"
    COPY = "copy"


def classify(rel_path: str, run: BuildRun) -> FileKind:
    """Return the branch ``rel_path`` takes; pure, touches no files."""
    cfg = run.config
    if rel_path == cfg.ignore_file or run.ignore_rules.is_ignored(rel_path):
        return FileKind.SKIP

    stem, ext = split_ext(rel_path)
    if ext in cfg.image.supported_formats:
        if is_flag_path(rel_path, cfg.image.flags_dir):
            return FileKind.FLAG
        if stem.rpartition("/")[2] == cfg.image.thumbnail_name:
            return FileKind.THUMBNAIL
        return FileKind.TEXTURE

    if rel_path == cfg.descriptor.filename:
        return FileKind.DESCRIPTOR
    return FileKind.COPY


def _log_write(source: str, dest: str):
    logger.info("Writing '%s'\n     to '%s'", source, dest)


def _write_flags(run: BuildRun, source: str, rel_path: str) -> List[str]:
    img_cfg = run.config.image
    grid = load_pixels(source, img_cfg.svg_default_size)

    def resize(g, width, height):
        return resize_pixels(g, width, height, img_cfg.resize_filter)

    written = []
    for dest_rel, flag in generate_flag_artifacts(grid, rel_path, resize, img_cfg.flags_dir):
        dest = get_output_path(dest_rel, run.output_dir)
        _log_write(source, dest)
        ensure_parent_dir(dest)
        write_dds(flag, dest)
        written.append(dest)
    return written


def _write_thumbnail(run: BuildRun, source: str, rel_path: str) -> List[str]:
    grid = load_pixels(source, run.config.image.svg_default_size)
    dest = get_output_path(rel_path, run.output_dir, ext=".png")
    _log_write(source, dest)
    ensure_parent_dir(dest)
    save_png(grid, dest)
    return [dest]


def _write_texture(run: BuildRun, source: str, rel_path: str) -> List[str]:
    grid = load_pixels(source, run.config.image.svg_default_size)
    dest = get_output_path(rel_path, run.output_dir, ext=".dds")
    _log_write(source, dest)
    ensure_parent_dir(dest)
    write_dds(grid, dest)
    return [dest]


def _write_descriptor(run: BuildRun, source: str, rel_path: str) -> List[str]:
    with open(source, "r", encoding="utf-8-sig") as f:
        text = f.read()
    suffix = run.config.descriptor.dev_suffix if run.dev_build else None
    rewritten = rewrite_descriptor(text, run.output_dir, suffix)
    dest = get_output_path(rel_path, run.output_dir)
    _log_write(source, dest)
    ensure_parent_dir(dest)
    write_bytes(rewritten.encode("utf-8"), dest)
    return [dest]


def _copy(run: BuildRun, source: str, rel_path: str) -> List[str]:
    dest = get_output_path(rel_path, run.output_dir)
    _log_write(source, dest)
    ensure_parent_dir(dest)
    shutil.copyfile(source, dest)
    return [dest]


_HANDLERS = {
    FileKind.FLAG: _write_flags,
    FileKind.THUMBNAIL: _write_thumbnail,
    FileKind.TEXTURE: _write_texture,
    FileKind.DESCRIPTOR: _write_descriptor,
    FileKind.COPY: _copy,
}


def transform_file(run: BuildRun, rel_path: str) -> List[str]:
    """Transform one source file and return the destinations written."""
    rel_path = normalize_rel_path(rel_path)
    kind = classify(rel_path, run)
    if kind is FileKind.SKIP:
        logger.debug("Skipping ignored file: %s", rel_path)
        return []
    source = os.path.join(run.source_root, *rel_path.split("/"))
    logger.debug("Transforming %s as %s", rel_path, kind.value)
    return _HANDLERS[kind](run, source, rel_path)
