"""Constants used through the app."""

import os
from pathlib import Path

# Directories
_env_instance_dir = os.getenv("XCNORM_INSTANCE_DIR")
INSTANCE_DIR = Path(_env_instance_dir) if _env_instance_dir else Path.cwd() / "instance"

SETTINGS_FILE = INSTANCE_DIR / "config.json"

# Config
ENV_PREFIX = "XCNORM_"

# Normalisation
DEFAULT_TIMEZONE_NAME = "UTC"
DEFAULT_SEASON_NAME_TEMPLATE = "Season {number}"
XC_ROOT_PARENT_ID = "0"  # XC categories without a parent hang off category 0
