"""Shared test fixtures for commit-attribution tests."""

import logging

import pytest

from commit_attribution.persistence import StatsDB
from commit_attribution.temporal.weeks import parse_timestamp


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture(autouse=True)
def _restore_logging():
    """setup_logging() rewires the root logger; undo it after each test."""
    root = logging.getLogger()
    pkg = logging.getLogger("commit_attribution")
    handlers, level, pkg_level = root.handlers[:], root.level, pkg.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    pkg.setLevel(pkg_level)


@pytest.fixture
def db(tmp_path):
    """Fresh stats database in a temp directory."""
    with StatsDB(tmp_path / "stats.db") as database:
        yield database


@pytest.fixture
def conn(db):
    return db.conn


@pytest.fixture
def ms():
    """ISO-8601 string -> epoch milliseconds."""
    return parse_timestamp


@pytest.fixture
def end_to_end_signals():
    """Signals whose aggregate is pinned down exactly."""
    return [
        {"classification": "ai-assisted", "login": "coderabbitai[bot]", "commitCount": 4},
        {"classification": "dependabot", "commitCount": 3},
        {"classification": "other-bot", "login": "sentry-bot", "commitCount": 2},
        {"classification": "human", "commitCount": 99},
    ]
