"""
Pytest configuration and fixtures for sortable-ids tests.
"""

import logging

import pytest

from sortable_ids.ids import Generator
from sortable_ids.state import SqliteDatabase


@pytest.fixture(autouse=True)
def reset_package_logger():
    """setup_logging() stops propagation; undo it so caplog keeps working."""
    yield
    package_logger = logging.getLogger("sortable_ids")
    for handler in list(package_logger.handlers):
        handler.close()
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


@pytest.fixture
def generator():
    return Generator(seed=42)


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "ids.db"


@pytest.fixture
def db(db_path):
    database = SqliteDatabase(db_path)
    yield database
    database.close()


@pytest.fixture
def identifiers_table(db):
    db.exec(
        "CREATE TABLE identifiers (id TEXT PRIMARY KEY, minted_at_ms INTEGER, note TEXT);"
    )
    return db
