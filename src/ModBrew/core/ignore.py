"""Ignore rules read from ``ignored_files.mod`` at the mod root.

Three kinds of line are recognized:

- ``*.psd``   extension wildcard: any path with that extension
- ``art/``    top-level directory prefix: first segment starts with ``art``
- ``a/b.txt`` exact relative path

Blank lines and lines starting with ``#`` are skipped.
"""

import logging
import os
from dataclasses import dataclass
from typing import FrozenSet, Iterable

logger = logging.getLogger("mod_pipeline")

IGNORE_FILE_NAME = "ignored_files.mod"


@dataclass(frozen=True)
class IgnoreRules:
    """Immutable rule set queried once per path."""

    exact: FrozenSet[str] = frozenset()
    extensions: FrozenSet[str] = frozenset()
    dir_prefixes: FrozenSet[str] = frozenset()

    @classmethod
    def parse(cls, lines: Iterable[str]) -> "IgnoreRules":
        exact, extensions, prefixes = set(), set(), set()
        for raw in lines:
            line = raw.strip()
            if not line or line.startswith("#"):
                continue
            if line.startswith("*"):
                extensions.add(line[1:])
            elif line.endswith(("/", "\\")):
                prefix = line.rstrip("/\\")
                if prefix:
                    prefixes.add(prefix)
            else:
                exact.add(line.replace("\\", "/"))
        return cls(frozenset(exact), frozenset(extensions), frozenset(prefixes))

    @classmethod
    def load(cls, manifest_path: str) -> "IgnoreRules":
        """Load rules from ``manifest_path``; a missing file means no rules."""
        if not os.path.isfile(manifest_path):
            logger.debug("No ignore file at %s", manifest_path)
            return cls()
        logger.info("Parsing ignored files from %s", manifest_path)
        with open(manifest_path, "r", encoding="utf-8-sig") as f:
            rules = cls.parse(f)
        logger.debug(
            "Loaded %d exact, %d extension, %d directory ignore rules",
            len(rules.exact), len(rules.extensions), len(rules.dir_prefixes),
        )
        return rules

    def is_ignored(self, rel_path: str) -> bool:
        path = rel_path.replace("\\", "/").strip("/")
        if path in self.exact:
            return True
        if self.extensions:
            ext = os.path.splitext(path.rpartition("/")[2])[1]
            if ext and ext in self.extensions:
                return True
        if self.dir_prefixes and "/" in path:
            first = path.split("/", 1)[0]
            if any(first.startswith(prefix) for prefix in self.dir_prefixes):
                return True
        return False

    def __len__(self) -> int:
        return len(self.exact) + len(self.extensions) + len(self.dir_prefixes)
