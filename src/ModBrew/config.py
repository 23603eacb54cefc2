"""Define typed configuration models for mod builds.

Use `BuildConfig` to load, validate, and persist runtime settings.
"""

import dataclasses
import logging
import os
import threading
from dataclasses import dataclass, field
from typing import List

import yaml

from . import default_output_dir
from .core.descriptor import DESCRIPTOR_FILE_NAME, DEV_SUFFIX
from .core.flags import FLAGS_DIR
from .core.ignore import IGNORE_FILE_NAME

logger = logging.getLogger("mod_pipeline.config")

_SUPPORTED_CONFIG_VERSION = 1
_RESIZE_FILTERS = {"area", "lanczos", "cubic", "linear", "nearest"}
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass
class ImageConfig:
    """Store settings for image classification and conversion."""

    # Compared case-sensitively against the file's extension.
    supported_formats: List[str] = field(default_factory=lambda: [
        ".gif", ".webp", ".pbm", ".jpeg", ".jpg", ".qoi", ".tga",
        ".tiff", ".bmp", ".png", ".dds", ".svg",
    ])
    thumbnail_name: str = "thumbnail"
    flags_dir: str = FLAGS_DIR
    resize_filter: str = "area"
    svg_default_size: int = 512


@dataclass
class DescriptorConfig:
    """Store settings for descriptor rewriting."""

    filename: str = DESCRIPTOR_FILE_NAME
    dev_suffix: str = DEV_SUFFIX


@dataclass
class WatchConfig:
    """Store settings for watch mode."""

    recursive: bool = True
    poll_interval: float = 0.5


@dataclass
class BuildConfig:
    """Master build configuration."""

    config_version: int = 1
    mod_path: str = field(default_factory=os.getcwd)
    output_dir: str = field(default_factory=default_output_dir)
    ignore_file: str = IGNORE_FILE_NAME
    dev_build: bool = False
    keep_going: bool = False
    show_progress: bool = True
    log_level: str = "INFO"
    log_file: str = ""

    image: ImageConfig = field(default_factory=ImageConfig)
    descriptor: DescriptorConfig = field(default_factory=DescriptorConfig)
    watch: WatchConfig = field(default_factory=WatchConfig)

    @classmethod
    def from_yaml(cls, path: str) -> "BuildConfig":
        """Load build configuration from YAML or return defaults."""
        if not os.path.exists(path):
            logger.info("Config file '%s' not found. Using defaults.", path)
            config = cls()
            config.validate()
            return config
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Failed to parse YAML config '{path}': {exc}") from exc
        if not isinstance(data, dict):
            raise ValueError(
                f"Config file '{path}' must contain a YAML mapping, "
                f"got {type(data).__name__}"
            )
        yaml_version = data.get("config_version", 1)
        if isinstance(yaml_version, int) and yaml_version > _SUPPORTED_CONFIG_VERSION:
            logger.warning(
                "Config file '%s' has config_version=%d, but this build only "
                "supports up to version %d. Some settings may be ignored.",
                path, yaml_version, _SUPPORTED_CONFIG_VERSION,
            )
        config = cls()
        _merge_dict_to_dataclass(config, data)
        try:
            config.validate()
        except ValueError as exc:
            raise ValueError(f"{path}: {exc}") from exc
        return config

    def to_yaml(self, path: str):
        """Write build configuration to a YAML file."""
        data = dataclasses.asdict(self)
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        tmp_path = f"{path}.tmp.{os.getpid()}.{threading.get_ident()}"
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
            os.replace(tmp_path, path)
        finally:
            if os.path.exists(tmp_path):
                try:
                    os.remove(tmp_path)
                except OSError:
                    pass

    def validate(self):
        """Validate configuration values. Raises ValueError on invalid config."""
        errors = []

        if not self.mod_path:
            errors.append("mod_path must not be empty")
        if not self.output_dir:
            errors.append("output_dir must not be empty")
        if self.log_level.upper() not in _LOG_LEVELS:
            errors.append(
                f"log_level must be one of {sorted(_LOG_LEVELS)}, got '{self.log_level}'"
            )
        if not self.ignore_file or "/" in self.ignore_file or "\\" in self.ignore_file:
            errors.append("ignore_file must be a plain file name at the mod root")

        img = self.image
        if not img.supported_formats:
            errors.append("image.supported_formats must not be empty")
        bad_exts = [e for e in img.supported_formats if not e.startswith(".") or len(e) < 2]
        if bad_exts:
            errors.append(f"image.supported_formats entries must look like '.png', got {bad_exts}")
        if not img.thumbnail_name:
            errors.append("image.thumbnail_name must not be empty")
        if len([p for p in img.flags_dir.strip("/").split("/") if p]) != 2:
            errors.append(
                f"image.flags_dir must have exactly two segments (e.g. 'gfx/flags'), "
                f"got '{img.flags_dir}'"
            )
        if img.resize_filter not in _RESIZE_FILTERS:
            errors.append(
                f"image.resize_filter must be one of {sorted(_RESIZE_FILTERS)}, "
                f"got '{img.resize_filter}'"
            )
        if img.svg_default_size < 1:
            errors.append("image.svg_default_size must be >= 1")

        if not self.descriptor.filename:
            errors.append("descriptor.filename must not be empty")
        if self.watch.poll_interval <= 0:
            errors.append("watch.poll_interval must be > 0")

        if errors:
            raise ValueError(
                "Configuration validation failed:\n" +
                "\n".join(f"  - {e}" for e in errors)
            )


def _merge_dict_to_dataclass(obj, data: dict, _path: str = ""):
    for key, value in data.items():
        full_key = f"{_path}{key}"
        if not hasattr(obj, key):
            logger.warning("Unknown config key ignored: '%s'", full_key)
            continue
        field_val = getattr(obj, key)
        if dataclasses.is_dataclass(field_val) and isinstance(value, dict):
            _merge_dict_to_dataclass(field_val, value, f"{full_key}.")
            continue
        if value is None:
            logger.warning(
                "Config key '%s' is null but field default is %s. Using default value.",
                full_key, type(field_val).__name__,
            )
            continue
        expected_type = type(field_val)
        # Allow int->float promotion and exact-integer floats for ints.
        if (not isinstance(value, expected_type)
                and not (expected_type is float and isinstance(value, int))
                and not (expected_type is int and isinstance(value, float)
                         and value == int(value))):
            logger.warning(
                "Config type mismatch for '%s': expected %s, got %s (%r). "
                "Using default value.",
                full_key, expected_type.__name__, type(value).__name__, value,
            )
            continue
        if expected_type is int and isinstance(value, float):
            value = int(value)
        if expected_type is float and isinstance(value, int):
            value = float(value)
        setattr(obj, key, value)
