"""Tag index: an unordered list of tag strings per content id."""

from sqlalchemy import delete, insert, select
from sqlalchemy.orm import Session

from db.models import tag_table


def replace_tags(session: Session, content_id: str, tags: list[str]) -> None:
    """Delete every tag for content_id, then insert one row per tag.

    Values are whitespace-trimmed. Duplicates and empty strings are kept.
    """
    delete_tags(session, content_id)
    if tags:
        session.execute(
            insert(tag_table),
            [{"id": content_id, "value": tag.strip()} for tag in tags],
        )


def delete_tags(session: Session, content_id: str) -> None:
    session.execute(delete(tag_table).where(tag_table.c.id == content_id))


def get_tags(session: Session, content_id: str) -> list[str]:
    """Raw tag rows for content_id, in no particular order."""
    rows = session.execute(select(tag_table.c.value).where(tag_table.c.id == content_id))
    return [row[0] for row in rows]


def split_tags(aggregate: str | None) -> list[str]:
    """Split a GROUP_CONCAT(value, ',') aggregate back into tags.

    Splits literally on commas so empty segments survive.
    """
    if not aggregate:
        return []
    return aggregate.split(",")
