from previews.cache import get_preview, put_preview
from previews.fetcher import fetch_preview, parse_preview
from previews.models import URLPreview, is_fulfilled, is_stale

__all__ = [
    "URLPreview",
    "fetch_preview",
    "get_preview",
    "is_fulfilled",
    "is_stale",
    "parse_preview",
    "put_preview",
]
