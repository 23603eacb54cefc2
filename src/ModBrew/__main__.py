"""Entrypoint for `python -m ModBrew`.

Usage:
  - One-shot build:  `python -m ModBrew -m ./MyMod`
  - Build and watch: `python -m ModBrew -m ./MyMod --watch`
"""
import logging

logger = logging.getLogger("mod_pipeline")


def _run_cli():
    from .cli import main as cli_main
    logger.debug("Dispatching to CLI entrypoint.")
    cli_main()


if __name__ == "__main__":
    _run_cli()
