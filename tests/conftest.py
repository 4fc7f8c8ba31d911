"""
Shared fixtures.

Every test runs against default configuration: no user config file and no
WARDMAP_* environment overrides leak in.
"""

from pathlib import Path

import pytest

from wardmap.config import reset_config

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    for key in ("WARDMAP_NEW_PIPELINES", "WARDMAP_BLANK_CONTAINERS", "WARDMAP_EVOLVE_MATURITY",
                "WARDMAP_MAX_TITLE", "WARDMAP_MIN_SIZE", "WARDMAP_MAX_SIZE", "WARDMAP_MAX_STAGE_NAME"):
        monkeypatch.delenv(key, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def coffee_map() -> str:
    return (FIXTURES / "coffee.owm").read_text()
