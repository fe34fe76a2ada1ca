"""
Pytest fixtures for the Spotter Network loader tests
"""

import os
import sys
from pathlib import Path
from unittest.mock import Mock

# Point the app at an in-memory database and keep the scheduler off before anything imports config
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SCHEDULER_ENABLED"] = "false"

# Add the project root to the path for module imports
current_dir = Path(__file__).parent
sys.path.insert(0, str(current_dir.parent))

import pytest

# The app module owns `db`; load it before any test module imports models
import app as app_module

# Test data directory
TEST_DATA_DIR = current_dir / "data"

WIND_REPORT = (
    r'Icon: 43.112000,-94.639999,000,3,5,"Reported By: Test Human\nHigh Wind\n'
    r'Time: 2018-09-20 22:52:00 UTC\n60 mph [Measured]\n'
    r'Notes: Strong winds measured at 60mph with anemometer"'
)

HAIL_REPORT = (
    r'Icon: 47.617706,-111.215248,000,4,4,"Reported By: Test Human\nHail\n'
    r'Time: 2018-09-20 22:49:29 UTC\nSize: 0.75" (Penny)\nNotes: None"'
)


def load_feed(name: str) -> str:
    """Read a fixture feed body from tests/data"""
    return (TEST_DATA_DIR / name).read_text(encoding="utf-8")


def feed_response(body: str, status_code: int = 200) -> Mock:
    """Stand-in for a requests.Response carrying a feed body"""
    return Mock(status_code=status_code, text=body)


@pytest.fixture(scope="session")
def flask_app():
    """The application module's Flask app"""
    return app_module.app


@pytest.fixture
def database(flask_app):
    """Fresh schema per test, inside an application context"""
    from app import db

    with flask_app.app_context():
        db.drop_all()
        db.create_all()
        yield db
        db.session.remove()


@pytest.fixture
def client(flask_app, database):
    # The app-wide ingest service keeps its seen set between requests
    app_module.ingest_service.seen = set()
    return flask_app.test_client()


@pytest.fixture
def parser():
    from report_parser import ReportParser
    return ReportParser()


@pytest.fixture
def ingest_service(database):
    from ingest import SpotterIngestService
    return SpotterIngestService(database)


@pytest.fixture
def reports_body():
    return load_feed("reports")
