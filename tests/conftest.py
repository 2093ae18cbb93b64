"""The conftest.py file serves as a means of providing fixtures for an entire directory.

Fixtures defined in a conftest.py can be used by any test in that package without needing to import them.
"""

import json
import os
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

# Set before xcnorm is imported, the settings class reads these at import time
os.environ["XCNORM_TESTING"] = "1"
os.environ.setdefault("XCNORM_INSTANCE_DIR", tempfile.mkdtemp(prefix="xcnorm_pytest_"))

from xcnorm.core.config import NormaliseConf, XCNormConf  # noqa: E402
from xcnorm.services.xc import StandardSerializer  # noqa: E402


@pytest.fixture
def serializer() -> StandardSerializer:
    """Serializer with the default (strict) config."""
    return StandardSerializer()


@pytest.fixture
def lenient_serializer() -> StandardSerializer:
    """Serializer that turns malformed numbers and dates into None."""
    return StandardSerializer(NormaliseConf(strict_coercion=False))


@pytest.fixture
def place_test_config(tmp_path: Path) -> Callable[[dict[str, Any]], Path]:
    """Fixture that places a config in the tmp_path.

    Returns: a function to write a config dict as config.json in the tmp_path.
    """

    def _place_test_config(config: dict[str, Any]) -> Path:
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps(config))
        return config_path

    return _place_test_config


@pytest.fixture
def get_test_config(place_test_config: Callable[[dict[str, Any]], Path]) -> Callable[[dict[str, Any]], XCNormConf]:
    """Function returns a function, which is how it needs to be."""

    def _get_test_config(config: dict[str, Any]) -> XCNormConf:
        return XCNormConf.force_load_config_file(place_test_config(config))

    return _get_test_config
