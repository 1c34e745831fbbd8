from __future__ import annotations

from pathlib import Path

import pytest

from flowguard.config.loader import ConfigLoader
from tests.helpers import FakeClock

pytest_plugins = ("pytester", "flowguard.testing.plugin")

WAITING_MODULES = (
    "flowguard.utils.wait",
    "flowguard.core.retry",
    "flowguard.core.actions",
    "flowguard.core.consent",
)


@pytest.fixture()
def fake_clock(monkeypatch):
    clock = FakeClock()
    for module in WAITING_MODULES:
        monkeypatch.setattr(f"{module}.time", clock)
    return clock


@pytest.fixture()
def suite_config():
    config_path = Path(__file__).resolve().parents[1] / "config" / "suite.json"
    return ConfigLoader.load(config_path)
