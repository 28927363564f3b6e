"""Tests for the tag index."""

from content.tags import delete_tags, get_tags, replace_tags, split_tags
from db.database import get_session, unit_of_work


def _read(content_id):
    session = get_session()
    try:
        return get_tags(session, content_id)
    finally:
        session.close()


def test_duplicates_preserved(store_db):
    with unit_of_work() as session:
        replace_tags(session, "c1", ["a", "b", "a"])
    assert sorted(_read("c1")) == ["a", "a", "b"]


def test_values_trimmed(store_db):
    with unit_of_work() as session:
        replace_tags(session, "c1", ["  python ", "web\t"])
    assert sorted(_read("c1")) == ["python", "web"]


def test_empty_tag_kept(store_db):
    with unit_of_work() as session:
        replace_tags(session, "c1", [""])
    assert _read("c1") == [""]


def test_replace_overwrites(store_db):
    with unit_of_work() as session:
        replace_tags(session, "c1", ["old", "older"])
    with unit_of_work() as session:
        replace_tags(session, "c1", ["new"])
    assert _read("c1") == ["new"]


def test_replace_with_nothing_clears(store_db):
    with unit_of_work() as session:
        replace_tags(session, "c1", ["a"])
        replace_tags(session, "c1", [])
    assert _read("c1") == []


def test_delete_only_touches_one_id(store_db):
    with unit_of_work() as session:
        replace_tags(session, "c1", ["a"])
        replace_tags(session, "c2", ["b"])
    with unit_of_work() as session:
        delete_tags(session, "c1")
    assert _read("c1") == []
    assert _read("c2") == ["b"]


def test_split_tags():
    assert split_tags(None) == []
    assert split_tags("") == []
    assert split_tags("a,b,a") == ["a", "b", "a"]
    assert split_tags("a,") == ["a", ""]
    assert split_tags(",a") == ["", "a"]
