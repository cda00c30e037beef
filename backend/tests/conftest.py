import sys
from pathlib import Path

import pytest

# Ensure the backend package root is on sys.path for direct pytest runs
BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))


@pytest.fixture
def session_factory(tmp_path):
    """Session factory bound to a throwaway SQLite file with all tables created."""
    from db import make_session_factory

    return make_session_factory(f"sqlite:///{tmp_path / 'daylog_test.db'}")
