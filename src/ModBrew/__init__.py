"""Provide package metadata and default locations for `ModBrew`."""

import logging as _logging
import os as _os
import sys as _sys
from pathlib import Path as _Path

__version__ = "0.3.0"
_logger = _logging.getLogger("mod_pipeline")

_GAME_MOD_SUBDIR = _Path("Paradox Interactive") / "Hearts of Iron IV" / "mod"


def _documents_dir() -> _Path:
    env = _os.environ.get("ModBrew_DOCUMENTS_DIR")
    if env:
        return _Path(env).expanduser()
    if _sys.platform == "win32":
        return _Path.home() / "Documents"
    # Linux builds of the game keep user data under XDG data home.
    return _Path(_os.environ.get("XDG_DATA_HOME", "~/.local/share")).expanduser()


def default_output_dir() -> str:
    """Return the game's user mod folder, the usual install target."""
    path = _documents_dir() / _GAME_MOD_SUBDIR
    _logger.debug("Resolved default output directory: %s", path)
    return str(path)


__all__ = ["__version__", "default_output_dir"]
