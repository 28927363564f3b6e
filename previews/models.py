"""URL preview record."""

from dataclasses import dataclass
from datetime import datetime, timedelta


@dataclass
class URLPreview:
    """Best-effort metadata for one external URL. Any field may be empty."""

    url: str
    title: str = ""
    snippet: str = ""
    thumbnail_url: str = ""
    embed_markup: str = ""  # trusted oEmbed HTML
    date_crawled: datetime | None = None


def is_fulfilled(preview: URLPreview) -> bool:
    """True when the preview has enough to render a card."""
    if not preview.url:
        return False
    if preview.title and preview.snippet:
        return True
    return bool(preview.embed_markup)


def is_stale(preview: URLPreview, max_age_days: int, now: datetime) -> bool:
    """True when the preview is older than max_age_days. 0 disables expiry."""
    if max_age_days <= 0:
        return False
    if preview.date_crawled is None:
        return True
    return now - preview.date_crawled > timedelta(days=max_age_days)
