import os
import sys
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Keep log files and user config out of the real home directory
_tmp = Path(tempfile.mkdtemp(prefix="tracker-tests-"))
os.environ.setdefault("TRACKER_LOG_DIR", str(_tmp / "logs"))
os.environ.setdefault("XDG_CONFIG_HOME", str(_tmp / "config"))

# Add the project root to the Python path so that tests can perform
# absolute imports like 'from project_tracker.domain import ...'
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))


@pytest.fixture
def now():
    return datetime.now(timezone.utc)


@pytest.fixture
def yesterday(now):
    return now - timedelta(days=1)


@pytest.fixture
def tomorrow(now):
    return now + timedelta(days=1)


@pytest.fixture
def day_after_tomorrow(now):
    return now + timedelta(days=2)
