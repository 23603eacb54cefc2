"""Command-line interface for mod builds."""

import argparse
import logging
import os
import sys

from .config import BuildConfig
from .core import setup_logging

logger = logging.getLogger("mod_pipeline")


def main():
    """Parse CLI arguments, build the mod, and optionally watch for changes."""
    parser = argparse.ArgumentParser(
        description="A tool for HOI4 mods that makes mod development easier.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  ModBrew --mod-path ./MyMod
  ModBrew -m ./MyMod -o ./build --watch
  ModBrew -m ./MyMod --dev --keep-going
  ModBrew --config modbrew.yaml
  ModBrew --generate-config
        """
    )
    parser.add_argument("--mod-path", "-m",
                        help="Folder containing the mod's code. Defaults to the CWD.")
    parser.add_argument("--output", "-o",
                        help="Folder the mod is built into. Defaults to the game's mod folder.")
    parser.add_argument("--watch", "-w", action="store_true",
                        help="Watch the mod and rebuild files when they change.")
    parser.add_argument("--dev", action="store_true",
                        help="Dev build: suffix the mod's name and output folder.")
    parser.add_argument("--keep-going", action="store_true",
                        help="Build every file and report all failures at the end.")
    parser.add_argument("--config", "-c", help="Path to config YAML")
    parser.add_argument("--generate-config", action="store_true",
                        help="Generate default modbrew.yaml")
    parser.add_argument("--no-progress", action="store_true",
                        help="Disable the progress bar")
    parser.add_argument("--log-level",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])

    args = parser.parse_args()

    if args.generate_config:
        config = BuildConfig()
        dest = args.config or "modbrew.yaml"
        if os.path.isdir(dest):
            dest = os.path.join(dest, "modbrew.yaml")
        config.to_yaml(dest)
        print(f"Generated default {dest}")
        return

    # Make config warnings visible before full logging is configured.
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")

    if args.config:
        if not os.path.exists(args.config):
            logger.error("Config file not found: %s", args.config)
            print(f"Error: Config file not found: {args.config}")
            sys.exit(1)
        try:
            config = BuildConfig.from_yaml(args.config)
        except ValueError as e:
            logger.error("Invalid config file '%s': %s", args.config, e)
            print(f"Error: Invalid config: {e}")
            sys.exit(1)
    else:
        config = BuildConfig()

    # CLI overrides
    if args.mod_path:
        config.mod_path = args.mod_path
    if args.output:
        config.output_dir = args.output
    if args.dev:
        config.dev_build = True
    if args.keep_going:
        config.keep_going = True
    if args.no_progress:
        config.show_progress = False
    if args.log_level:
        config.log_level = args.log_level

    if not os.path.isdir(config.mod_path):
        logger.error("Mod directory invalid or not found: %s", config.mod_path)
        print(f"Error: Mod directory not found: {config.mod_path}")
        sys.exit(1)

    try:
        config.validate()
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)

    setup_logging(config.log_level, config.log_file or None, force=True)

    from .pipeline import BuildFailedError, ModBuilder, UnsafeOutputPathError
    builder = ModBuilder(config)

    try:
        builder.build()
    except KeyboardInterrupt:
        logger.warning("Interrupted by user.")
        sys.exit(130)
    except BuildFailedError as exc:
        logger.error("Build failed: %s", exc)
        sys.exit(1)
    except UnsafeOutputPathError as exc:
        logger.error("Build aborted: %s", exc)
        sys.exit(1)
    except OSError as exc:
        logger.error("Build failed: %s", exc, exc_info=True)
        sys.exit(1)

    if not args.watch:
        return

    from .watch import watch
    watch(builder)


if __name__ == "__main__":
    main()
