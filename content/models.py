"""Content piece domain types."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum

from previews.models import URLPreview


class PostType(IntEnum):
    DEFAULT = 0
    REPOST = 1
    HEART = 2
    ALL = 3  # listing filter only, never stored
    STATUS = 4


# Query-string names accepted by the listing filter.
POST_TYPE_NAMES: dict[str, PostType] = {
    "post": PostType.DEFAULT,
    "repost": PostType.REPOST,
    "heart": PostType.HEART,
    "status": PostType.STATUS,
}


def requires_response_url(post_type: PostType) -> bool:
    """Reposts and hearts only make sense pointing at a URL."""
    if post_type in (PostType.REPOST, PostType.HEART):
        return True
    if post_type in (PostType.DEFAULT, PostType.STATUS):
        return False
    raise ValueError(f"{post_type!r} is not a storable post type")


@dataclass
class ContentPiece:
    """One stored post. ``id`` and ``date_created`` are assigned on create."""

    uri: str = ""
    title: str = ""
    body: str = ""  # trusted markup, rendered as is
    snippet: str = ""
    date: datetime = field(default_factory=datetime.utcnow)
    type: PostType = PostType.DEFAULT
    response_to_url: str = ""
    tags: list[str] = field(default_factory=list)
    id: str = ""
    date_created: datetime | None = None
    response_to_url_preview: URLPreview | None = None
