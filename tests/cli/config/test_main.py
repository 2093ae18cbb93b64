import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from pytest_mock import MockerFixture

from xcnorm.cli.config.__main__ import generate_config_file, main


@pytest.fixture(autouse=True)
def no_logger_setup(mocker: MockerFixture) -> None:
    """Keep the CLI from attaching handlers to the root logger."""
    mocker.patch("xcnorm.cli.config.__main__.setup_logger")


def test_generate_fresh_config(tmp_path: Path) -> None:
    config_path = tmp_path / "config.json"

    with pytest.raises(SystemExit) as exc_info:
        main(["--config", str(config_path)])

    assert exc_info.value.code == 0
    written = json.loads(config_path.read_text())
    assert written["normalise"] == {
        "strict_coercion": True,
        "naive_timezone": "UTC",
        "season_name_template": "Season {number}",
    }
    assert written["logging"]["level"] == "INFO"


def test_generate_refuses_existing(
    place_test_config: Callable[[dict[str, Any]], Path],
    caplog: pytest.LogCaptureFixture,
) -> None:
    config_path = place_test_config({"normalise": {"strict_coercion": False}})

    with caplog.at_level(logging.ERROR), pytest.raises(SystemExit) as exc_info:
        main(["--config", str(config_path)])

    assert exc_info.value.code == 1
    assert "already exists" in caplog.text
    assert json.loads(config_path.read_text()) == {"normalise": {"strict_coercion": False}}


def test_generate_overwrite_keeps_settings(
    place_test_config: Callable[[dict[str, Any]], Path],
) -> None:
    config_path = place_test_config({"normalise": {"strict_coercion": False, "naive_timezone": "Not/AZone"}})

    generate_config_file(config_path, overwrite=True)

    written = json.loads(config_path.read_text())
    assert written["normalise"]["strict_coercion"] is False
    assert written["normalise"]["naive_timezone"] == "UTC"
    assert written["normalise"]["season_name_template"] == "Season {number}"

    (backup,) = (config_path.parent / "config_backups").iterdir()
    assert json.loads(backup.read_text()) == {"normalise": {"strict_coercion": False, "naive_timezone": "Not/AZone"}}


def test_generate_overwrite_invalid_json(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text("{not json")

    with caplog.at_level(logging.ERROR):
        generate_config_file(config_path, overwrite=True)

    assert "Failed to load existing configuration" in caplog.text
    assert json.loads(config_path.read_text())["normalise"]["strict_coercion"] is True
    assert len(list((tmp_path / "config_backups").iterdir())) == 1


def test_generate_bad_path(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.ERROR), pytest.raises(SystemExit) as exc_info:
        generate_config_file(tmp_path / "config.toml")

    assert exc_info.value.code == 1
    assert "must have a .json extension" in caplog.text

    with pytest.raises(SystemExit):
        generate_config_file(tmp_path)
