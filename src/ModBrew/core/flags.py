"""Derive the three flag textures the game expects for every country flag.

A source image at ``gfx/flags/<rest>`` becomes::

    gfx/flags/<rest>.dds          82 x 52
    gfx/flags/medium/<rest>.dds   41 x 26
    gfx/flags/small/<rest>.dds    10 x 7
"""

from dataclasses import dataclass
from typing import Callable, List, Tuple

from .paths import normalize_rel_path, with_extension
from .pixels import PixelGrid

FLAGS_DIR = "gfx/flags"
FLAG_EXT = ".dds"


@dataclass(frozen=True)
class FlagSize:
    name: str
    width: int
    height: int
    subdir: str


FLAG_SIZES: Tuple[FlagSize, ...] = (
    FlagSize("large", 82, 52, ""),
    FlagSize("medium", 41, 26, "medium"),
    FlagSize("small", 10, 7, "small"),
)


def is_flag_path(rel_path: str, flags_dir: str = FLAGS_DIR) -> bool:
    """Return True for files strictly below ``flags_dir``."""
    prefix = flags_dir.strip("/") + "/"
    return rel_path.startswith(prefix) and len(rel_path) > len(prefix)


def flag_destination(rel_path: str, size: FlagSize, flags_dir: str = FLAGS_DIR) -> str:
    """Return the mod-relative destination of one flag size."""
    rel = normalize_rel_path(rel_path)
    root = flags_dir.strip("/")
    rest = rel[len(root) + 1:]
    parts = [root, size.subdir, rest] if size.subdir else [root, rest]
    return with_extension("/".join(parts), FLAG_EXT)


def generate_flag_artifacts(
    grid: PixelGrid,
    rel_path: str,
    resize: Callable[[PixelGrid, int, int], PixelGrid],
    flags_dir: str = FLAGS_DIR,
) -> List[Tuple[str, PixelGrid]]:
    """Return (destination, resized grid) for the large, medium and small flags."""
    if not is_flag_path(rel_path, flags_dir):
        raise ValueError(f"Not under {flags_dir}/: {rel_path}")
    return [
        (flag_destination(rel_path, size, flags_dir), resize(grid, size.width, size.height))
        for size in FLAG_SIZES
    ]
