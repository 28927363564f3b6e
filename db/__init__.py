from db.database import get_engine, get_session, init_db, unit_of_work
from db.models import CachedPreview, Content, tag_table

__all__ = [
    "get_engine",
    "get_session",
    "init_db",
    "unit_of_work",
    "CachedPreview",
    "Content",
    "tag_table",
]
