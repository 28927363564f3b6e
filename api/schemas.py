"""Request payloads for the weblog API and their mapping to content pieces."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from content.formatting import derive_uri
from content.models import ContentPiece, PostType
from errors import ValidationError


class TransactionKind(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class ContentPayload(BaseModel):
    """Editor form for creating, updating or deleting a piece."""

    transaction: TransactionKind = TransactionKind.CREATE
    id: str = ""
    uri: str = ""
    title: str = ""
    body: str = ""
    snippet: str = ""
    date: str = ""  # YYYY-MM-DD
    time: str = ""  # HH:MM
    type: PostType = PostType.DEFAULT
    response_to_url: str = ""
    tags: list[str] | str = Field(default_factory=list)  # list, or comma separated
    rescrape: bool = False


def _parse_date(payload: ContentPayload, now: datetime) -> datetime:
    if not payload.date or not payload.time:
        return now
    try:
        return datetime.strptime(f"{payload.date} {payload.time}", "%Y-%m-%d %H:%M")
    except ValueError as e:
        raise ValidationError(f"invalid date {payload.date!r} {payload.time!r}") from e


def to_piece(payload: ContentPayload, now: datetime | None = None) -> ContentPiece:
    """Map a validated payload to the piece it describes.

    A missing date or time means now; a missing uri is derived from the title.
    """
    now = now or datetime.utcnow()
    tags = payload.tags.split(",") if isinstance(payload.tags, str) else list(payload.tags)
    return ContentPiece(
        id=payload.id,
        uri=payload.uri or derive_uri(payload.title, now),
        title=payload.title,
        body=payload.body,
        snippet=payload.snippet,
        date=_parse_date(payload, now),
        type=payload.type,
        response_to_url=payload.response_to_url,
        tags=tags,
    )
