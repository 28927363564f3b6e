from content.models import ContentPiece, PostType
from content.pagination import PageInfo, compute_page, parse_page
from content.store import (
    create_content,
    create_sample,
    delete_content,
    get_content,
    get_contents,
    update_content,
)

__all__ = [
    "ContentPiece",
    "PageInfo",
    "PostType",
    "compute_page",
    "create_content",
    "create_sample",
    "delete_content",
    "get_content",
    "get_contents",
    "parse_page",
    "update_content",
]
