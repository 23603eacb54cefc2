"""Build run and build report records."""

import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Tuple

from .ignore import IgnoreRules

if TYPE_CHECKING:
    from ..config import BuildConfig


@dataclass(frozen=True)
class BuildRun:
    """Everything a single-file transform needs, fixed for one build.

    The ignore rules are loaded once when the run is created and reused by
    every later transform, including watch-triggered ones.
    """

    source_root: str
    output_dir: str
    dev_build: bool
    ignore_rules: IgnoreRules
    config: "BuildConfig"

    def __post_init__(self) -> None:
        """Store both roots as absolute paths for stable relpath math."""
        object.__setattr__(self, "source_root", _abspath(self.source_root))
        object.__setattr__(self, "output_dir", _abspath(self.output_dir))


def _abspath(path: str) -> str:
    return os.path.abspath(os.path.expanduser(path))


@dataclass
class BuildReport:
    """Outcome of a full build."""

    mod_name: str
    output_dir: str
    descriptor_path: str = ""
    files_seen: int = 0
    files_skipped: int = 0
    artifacts: List[str] = field(default_factory=list)
    failures: List[Tuple[str, str]] = field(default_factory=list)
    elapsed_seconds: float = 0.0

    @property
    def ok(self) -> bool:
        return not self.failures

    def to_dict(self) -> dict:
        """Return a JSON-friendly summary."""
        return {
            "mod_name": self.mod_name,
            "output_dir": self.output_dir,
            "descriptor_path": self.descriptor_path,
            "files_seen": self.files_seen,
            "files_skipped": self.files_skipped,
            "artifacts": len(self.artifacts),
            "failures": [{"path": p, "error": e} for p, e in self.failures],
            "elapsed_seconds": round(self.elapsed_seconds, 3),
        }
