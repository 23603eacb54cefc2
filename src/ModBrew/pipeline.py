"""Orchestrate full and incremental mod builds.

`ModBuilder` clears and repopulates the output directory, writes the
launcher descriptor next to it, and exposes `handle_change` for
watch-triggered single-file updates.
"""

import logging
import os
import shutil
import threading
import time
from typing import Iterator, List, Optional

from tqdm import tqdm

from .config import BuildConfig
from .core import (
    BuildReport,
    BuildRun,
    IgnoreRules,
    ensure_parent_dir,
    is_within,
    read_descriptor_value,
    rewrite_descriptor,
    transform_file,
    write_bytes,
)

logger = logging.getLogger("mod_pipeline")


class UnsafeOutputPathError(ValueError):
    """Raised when the computed output directory is not safe to delete."""


class BuildFailedError(RuntimeError):
    """Raised after a keep-going build when one or more files failed."""

    def __init__(self, report: BuildReport):
        self.report = report
        listed = "\n".join(f"  - {path}: {err}" for path, err in report.failures)
        super().__init__(
            f"{len(report.failures)} file(s) failed to build:\n{listed}"
        )


def _get_version() -> str:
    """Read version from package."""
    try:
        from . import __version__
        return __version__
    except ImportError:
        return "unknown"


class ModBuilder:
    """Build a mod source tree into the game's mod folder."""

    def __init__(self, config: BuildConfig):
        """Initialize the builder; no files are touched until `build`."""
        self.config = config
        self.run_state: Optional[BuildRun] = None
        self._change_lock = threading.Lock()

    @property
    def mod_path(self) -> str:
        return os.path.abspath(os.path.expanduser(self.config.mod_path))

    @property
    def output_root(self) -> str:
        return os.path.abspath(os.path.expanduser(self.config.output_dir))

    @property
    def mod_name(self) -> str:
        """Folder name of the mod, with the dev suffix for dev builds."""
        name = os.path.basename(os.path.normpath(self.mod_path))
        if self.config.dev_build:
            name += self.config.descriptor.dev_suffix
        return name

    @property
    def output_path(self) -> str:
        return os.path.join(self.output_root, self.mod_name)

    @property
    def launcher_descriptor_path(self) -> str:
        """Descriptor the launcher reads, one level above the output directory."""
        return os.path.join(self.output_root, f"{self.mod_name}.mod")

    def create_run(self) -> BuildRun:
        """Load the ignore rules and freeze the settings for one build."""
        ignore_path = os.path.join(self.mod_path, self.config.ignore_file)
        return BuildRun(
            source_root=self.mod_path,
            output_dir=self.output_path,
            dev_build=self.config.dev_build,
            ignore_rules=IgnoreRules.load(ignore_path),
            config=self.config,
        )

    def _check_output_path(self, run: BuildRun):
        out = run.output_dir
        if os.path.dirname(out) != self.output_root or not os.path.basename(out):
            raise UnsafeOutputPathError(
                f"Output directory {out!r} is not a direct child of {self.output_root!r}"
            )
        if is_within(run.source_root, out):
            raise UnsafeOutputPathError(
                f"Refusing to clear {out!r}: it contains the mod source {run.source_root!r}"
            )
        if is_within(out, run.source_root):
            raise UnsafeOutputPathError(
                f"Refusing to build into {out!r}: it lies inside the mod source"
            )

    def _iter_source_files(self, source_root: str) -> Iterator[str]:
        for root, dirs, files in os.walk(source_root):
            dirs.sort()
            for fname in sorted(files):
                fpath = os.path.join(root, fname)
                yield os.path.relpath(fpath, source_root).replace(os.sep, "/")

    def write_launcher_descriptor(self, run: BuildRun) -> str:
        """Write ``<mod name>.mod`` next to the output directory."""
        source = os.path.join(run.source_root, self.config.descriptor.filename)
        if os.path.isfile(source):
            with open(source, "r", encoding="utf-8-sig") as f:
                text = f.read()
        else:
            logger.warning(
                "No %s found in %s; generating a minimal descriptor.",
                self.config.descriptor.filename, run.source_root,
            )
            text = f'name="{os.path.basename(run.source_root)}"\n'
        display_name = read_descriptor_value(text, "name")
        if display_name:
            logger.info("Descriptor name: %s", display_name)

        suffix = self.config.descriptor.dev_suffix if run.dev_build else None
        dest = self.launcher_descriptor_path
        ensure_parent_dir(dest)
        write_bytes(rewrite_descriptor(text, run.output_dir, suffix).encode("utf-8"), dest)
        logger.info("Wrote launcher descriptor: %s", dest)
        return dest

    def build(self) -> BuildReport:
        """Run a full build: clear the output, write descriptors, walk sources.

        Raises:
            OSError: on any filesystem failure (fail-fast mode).
            BuildFailedError: when ``keep_going`` is set and files failed.
        """
        start_time = time.time()
        if not os.path.isdir(self.mod_path):
            raise FileNotFoundError(f"Mod directory not found: {self.mod_path}")

        logger.info("=" * 60)
        logger.info("MOD BUILD v%s", _get_version())
        logger.info("=" * 60)
        logger.info("Mod Name:    %s", self.mod_name)
        logger.info("Mod Path:    %s", self.mod_path)
        logger.info("Output Path: %s", self.output_path)
        if self.config.dev_build:
            logger.info("*** DEV BUILD ***")

        run = self.create_run()
        self._check_output_path(run)
        self.run_state = run

        if os.path.exists(run.output_dir):
            logger.info("Deleting previous build at %s", run.output_dir)
            shutil.rmtree(run.output_dir)
        os.makedirs(run.output_dir, exist_ok=True)

        report = BuildReport(mod_name=self.mod_name, output_dir=run.output_dir)
        report.descriptor_path = self.write_launcher_descriptor(run)

        rel_paths = list(self._iter_source_files(run.source_root))
        for rel_path in tqdm(rel_paths, desc="Building", unit="file",
                             disable=not self.config.show_progress):
            report.files_seen += 1
            try:
                written = transform_file(run, rel_path)
            except Exception as exc:
                if not self.config.keep_going:
                    raise
                logger.error("Failed to build %s: %s", rel_path, exc, exc_info=True)
                report.failures.append((rel_path, str(exc)))
                continue
            if not written:
                report.files_skipped += 1
            report.artifacts.extend(written)

        report.elapsed_seconds = time.time() - start_time
        logger.info(
            "Build finished in %.2fs: %d files, %d skipped, %d artifacts, %d failed",
            report.elapsed_seconds, report.files_seen, report.files_skipped,
            len(report.artifacts), len(report.failures),
        )
        if report.failures:
            raise BuildFailedError(report)
        return report

    def transform_path(self, rel_path: str) -> List[str]:
        """Transform one mod-relative path using the current build run."""
        if self.run_state is None:
            self.run_state = self.create_run()
        written = transform_file(self.run_state, rel_path)
        if written and rel_path == self.config.descriptor.filename:
            written.append(self.write_launcher_descriptor(self.run_state))
        return written

    def handle_change(self, path: str) -> List[str]:
        """Re-run the transform for one changed file; never raises.

        Returns the destinations written, or an empty list when the path
        was skipped or its transform failed.
        """
        with self._change_lock:
            try:
                abs_path = os.path.realpath(path)
                mod_root = os.path.realpath(self.mod_path)
                if not is_within(abs_path, mod_root) or abs_path == mod_root:
                    logger.debug("Ignoring change outside the mod: %s", path)
                    return []
                if not os.path.isfile(abs_path):
                    logger.debug("Ignoring change for non-file path: %s", path)
                    return []
                rel_path = os.path.relpath(abs_path, mod_root).replace(os.sep, "/")
                logger.info("File changed: %s", rel_path)
                return self.transform_path(rel_path)
            except Exception as exc:
                logger.error("Failed to update %s: %s", path, exc, exc_info=True)
                return []
