"""Relative-path normalization and destination path helpers."""

import os
from pathlib import PurePosixPath


class PathStructureError(ValueError):
    """Raised when a computed destination path has no parent directory."""


def normalize_rel_path(rel_path: str) -> str:
    """Normalize a mod-relative path to a canonical, traversal-free POSIX form."""
    raw = str(rel_path).replace("\\", "/")
    p = PurePosixPath(raw)
    if p.is_absolute():
        raise ValueError(f"Mod path must be relative, got absolute path: {rel_path}")

    parts = []
    for part in p.parts:
        if part in ("", "."):
            continue
        if part == "..":
            if parts:
                parts.pop()
            else:
                raise ValueError(f"Mod path escapes root via '..': {rel_path}")
            continue
        parts.append(part)

    if not parts:
        raise ValueError(f"Mod path is empty after normalization: {rel_path}")
    return "/".join(parts)


def split_ext(rel_path: str):
    """Split ``rel_path`` into (stem path, extension) on the final segment only.

    The extension keeps its original case and includes the dot. Dotfiles
    such as ``.gitignore`` have no extension.
    """
    head, _, name = rel_path.rpartition("/")
    stem, ext = os.path.splitext(name)
    prefix = f"{head}/" if head else ""
    return prefix + stem, ext


def with_extension(rel_path: str, ext: str) -> str:
    """Return ``rel_path`` with its extension replaced by ``ext``."""
    stem, _ = split_ext(rel_path)
    return stem + ext


def get_output_path(rel_path: str, output_dir: str, ext: str = None) -> str:
    """Return the absolute destination for a mod-relative path."""
    rel = normalize_rel_path(rel_path)
    if ext is not None:
        rel = with_extension(rel, ext)
    return os.path.join(output_dir, *rel.split("/"))


def ensure_parent_dir(dest_path: str) -> str:
    """Create the directory holding ``dest_path`` and return it.

    Raises:
        PathStructureError: ``dest_path`` has no directory component.
    """
    parent = os.path.dirname(dest_path)
    if not parent:
        raise PathStructureError(f"Destination is not inside a folder: {dest_path!r}")
    os.makedirs(parent, exist_ok=True)
    return parent


def is_within(path: str, root: str) -> bool:
    """Return True when ``path`` equals ``root`` or lies below it."""
    path_real = os.path.realpath(path)
    root_real = os.path.realpath(root)
    try:
        return os.path.commonpath([path_real, root_real]) == root_real
    except ValueError:
        # Different drives on Windows.
        return False
