import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from config.models import Record  # noqa: E402


@pytest.fixture
def login_records():
    source = [Record("1", "login user with password")]
    candidates = [
        Record("2", "user login with password"),
        Record("3", "completely unrelated text about weather"),
    ]
    return source, candidates


@pytest.fixture
def stories():
    return [
        Record("S-1", "As a user I can reset my password by email"),
        Record("S-2", "Export the monthly report to Excel"),
        Record("S-3", "As a user I can reset my password via email link"),
        Record("S-4", "Show the weather forecast on the dashboard"),
    ]
