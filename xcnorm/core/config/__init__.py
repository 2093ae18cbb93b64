"""Config loading, setup, validating, writing."""

import json
import os
import typing
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Self

from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from xcnorm.constants import ENV_PREFIX, SETTINGS_FILE
from xcnorm.utils.logger import LoggingConf, get_logger

from .normalise import NormaliseConf

if TYPE_CHECKING:
    from pathlib import Path
else:
    Path = object
logger = get_logger(__name__)


__all__ = [
    "LoggingConf",
    "NormaliseConf",
    "XCNormConf",
]


class XCNormConf(BaseSettings):
    """Settings Definition."""

    model_config = SettingsConfigDict(
        extra="ignore",
        env_file=".env" if not os.getenv("XCNORM_TESTING") else None,
        env_prefix=ENV_PREFIX,
        case_sensitive=False,
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        json_file=SETTINGS_FILE,
    )

    # Default values for our settings
    logging: LoggingConf = LoggingConf()
    normalise: NormaliseConf = NormaliseConf()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003 Don't use but must include.
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Specify the priority of settings sources."""
        # Skip dotenv loading when in test mode
        if os.getenv("XCNORM_TESTING"):
            return (
                init_settings,
                env_settings,
                JsonConfigSettingsSource(settings_cls),
            )
        return (  # pragma: no cover
            init_settings,
            dotenv_settings,
            env_settings,
            JsonConfigSettingsSource(settings_cls),
        )

    def write_backup_config(
        self,
        config_path: Path,
        existing_data: typing.Any,  # noqa: ANN401
        reason: str = "Validation has changed the config file",
    ) -> None:
        """Keep a copy of a config file before it is overwritten."""
        time_str = datetime.now(tz=UTC).strftime("%Y-%m-%d_%H%M%S")
        config_backup_dir = config_path.parent / "config_backups"
        config_backup_dir.mkdir(parents=True, exist_ok=True)
        backup_file = config_backup_dir / f"{config_path.stem}_{time_str}{config_path.suffix}.bak"
        logger.warning(
            "%s, backing up the old one to %s",
            reason,
            backup_file,
        )
        with backup_file.open("w") as f:
            f.write(json.dumps(existing_data))

    def write_config(self, config_path: Path | None = None) -> None:
        """Write the current settings to a JSON file."""
        if config_path is None:
            config_path = SETTINGS_FILE

        config_path.parent.mkdir(parents=True, exist_ok=True)

        config_data = json.loads(self.model_dump_json())

        if config_path.exists():
            existing_text = config_path.read_text()
            try:
                existing_data = json.loads(existing_text)
            except json.JSONDecodeError:
                existing_data = existing_text

            if existing_data != config_data:  # The new object will be valid, so we back up the old one
                self.write_backup_config(config_path, existing_data)
        else:
            logger.warning("Writing fresh config file at %s", config_path.absolute())

        logger.info("Writing config to %s", config_path)
        with config_path.open("w") as f:
            f.write(self.model_dump_json(indent=2, exclude_none=False))

        logger.info("Config write complete")

    @classmethod
    def force_load_config_file(cls, config_path: Path) -> Self:
        """Load the configuration file. File contents takes precedence over env vars."""
        if not config_path.exists() or not config_path.is_file():
            logger.warning(
                "Config file %s does not exist, loading defaults",
                config_path.absolute(),
            )
            return cls()

        logger.info("Loading config from %s", config_path.absolute())
        with config_path.open("r") as f:
            config = json.load(f)

        return cls(**config)

    @classmethod
    def force_load_defaults(cls) -> Self:
        """Load the default configuration, the settings file and env vars still apply."""
        logger.info("Loading default config")
        return cls()
