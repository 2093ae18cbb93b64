"""CLI For Config generation."""

import argparse
import sys
from pathlib import Path

from xcnorm.constants import SETTINGS_FILE
from xcnorm.core.config import XCNormConf
from xcnorm.utils.logger import get_logger, setup_logger
from xcnorm.version import PROGRAM_NAME, __version__

logger = get_logger(__name__)


def _check_config_path(config_path: Path, *, overwrite: bool = False) -> None:
    """Check the config path can be written to, exit if not."""
    cannot_proceed = False

    if config_path.is_dir():
        logger.error("The specified path %s is a directory, not a file.", config_path)
        cannot_proceed = True
    elif config_path.is_file() and not overwrite:
        logger.error("Configuration file already exists at: %s", config_path)
        logger.error("Use --overwrite to update the existing configuration file.")
        cannot_proceed = True

    if config_path.suffix != ".json":
        logger.error("Configuration file must have a .json extension, got %s", config_path.suffix)
        cannot_proceed = True

    if cannot_proceed:
        logger.error("Exiting due to configuration path issues.")
        sys.exit(1)


def generate_config_file(config_path: Path, *, overwrite: bool = False) -> None:
    """Write a config file, an existing one is validated and rewritten with any missing defaults."""
    _check_config_path(config_path, overwrite=overwrite)

    config = XCNormConf.force_load_defaults()
    if config_path.is_file():  # If we are here, we are overwriting
        logger.info("Updating existing configuration at %s", config_path)
        try:
            config = XCNormConf.force_load_config_file(config_path)
        except ValueError:  # Covers JSONDecodeError and ValidationError
            logger.error("Failed to load existing configuration")  # noqa: TRY400 Short error
            logger.info("Generating a new configuration file instead.")
    else:
        logger.info("Generating configuration file at %s", config_path)

    config.write_config(config_path=config_path)


def main(argv: list[str] | None = None) -> None:
    """Main CLI for config generation."""
    parser = argparse.ArgumentParser(
        prog=f"{PROGRAM_NAME}-config",
        description=f"{PROGRAM_NAME} {__version__} config generator",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=SETTINGS_FILE,
        help="Path to write the configuration file to, defaults to the instance config.",
    )
    parser.add_argument(
        "--overwrite",
        action="store_true",
        help="Validate and rewrite an existing configuration file, the old one is backed up if it changes.",
    )
    args = parser.parse_args(argv)

    setup_logger()

    generate_config_file(args.config, overwrite=args.overwrite)
    sys.exit(0)


if __name__ == "__main__":
    main()
