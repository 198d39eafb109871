import sys
from datetime import date
from pathlib import Path

import pytest

# Ensure the project root is importable during tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from workflow_app.tracker.controllers import AppController, ConfigManager  # noqa: E402
from workflow_app.tracker.storage import DayRecordStore  # noqa: E402


@pytest.fixture
def store(tmp_path):
    return DayRecordStore(tmp_path / "data.json")


@pytest.fixture
def controller(tmp_path, store):
    config_manager = ConfigManager(tmp_path / "home")
    return AppController(store, config_manager, today=date(2024, 3, 15))
