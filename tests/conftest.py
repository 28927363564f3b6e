"""Shared fixtures: a fresh SQLite database per test."""

from datetime import datetime
from unittest.mock import MagicMock

import pytest

import db.database as db_mod
from previews.models import URLPreview


@pytest.fixture
def store_db(tmp_path, monkeypatch):
    """Use a temporary database for each test."""
    db_path = tmp_path / "test.db"
    # Patch in both config and db.database (which imports by value)
    monkeypatch.setattr("config.DB_PATH", db_path)
    monkeypatch.setattr("config.DATA_DIR", tmp_path)
    monkeypatch.setattr("db.database.DB_PATH", db_path)
    monkeypatch.setattr("db.database.DATA_DIR", tmp_path)

    # Reset engine/session so they use the new path
    db_mod.dispose_engine()
    db_mod.init_db()

    yield db_path

    db_mod.dispose_engine()


@pytest.fixture
def fake_fetch():
    """A preview fetcher that never touches the network."""

    def _preview(url: str) -> URLPreview:
        return URLPreview(
            url=url,
            title=f"Title of {url}",
            snippet="A snippet",
            thumbnail_url="https://img.example/thumb.png",
            date_crawled=datetime.utcnow(),
        )

    return MagicMock(side_effect=_preview)
