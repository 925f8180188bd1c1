"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from link_catalog.storage.database import Database
from link_catalog.storage.repository import LinkRepository


@pytest.fixture
def db(tmp_path):
    """A Database with a fresh schema in a temporary file."""
    database = Database(tmp_path / "links.db", pool_size=2, timeout=1.0)
    database.create_schema()
    yield database
    if not database.closed:
        database.destroy_schema()
        database.close()


@pytest.fixture
def repo(db):
    return LinkRepository(db)


@pytest.fixture
def insert(db):
    """Insert a row directly, bypassing the repository."""

    def _insert(
        url: str,
        title: str,
        language: str = "en",
        description: str | None = None,
    ) -> dict:
        result = db.query(
            "INSERT INTO links (url, title, language, description) VALUES (?, ?, ?, ?) "
            "RETURNING id, created_on",
            (url, title, language, description),
        )
        return result.rows[0]

    return _insert


@pytest.fixture
def four_links(insert):
    return [insert(f"https://test{i}.com", f"test site {i}") for i in range(1, 5)]
