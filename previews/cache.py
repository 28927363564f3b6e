"""URL preview cache backed by the url_preview table."""

import logging

from sqlalchemy import delete, insert, select
from sqlalchemy.orm import Session

from db.models import CachedPreview
from previews.models import URLPreview

logger = logging.getLogger(__name__)


def get_preview(session: Session, url: str) -> URLPreview | None:
    """Return the cached preview for url, or None."""
    row = session.execute(
        select(CachedPreview).where(CachedPreview.url == url).limit(1)
    ).scalar_one_or_none()
    if row is None:
        return None
    return URLPreview(
        url=row.url,
        title=row.title or "",
        snippet=row.snippet or "",
        thumbnail_url=row.thumbnail_url or "",
        embed_markup=row.oembed_html or "",
        date_crawled=row.date_crawled,
    )


def put_preview(session: Session, url: str, preview: URLPreview) -> None:
    """Replace whatever is cached for url with preview.

    Delete then insert, so every field is replaced together and there is
    never more than one row per url.
    """
    session.execute(delete(CachedPreview).where(CachedPreview.url == url))
    session.execute(
        insert(CachedPreview).values(
            url=url,
            title=preview.title,
            snippet=preview.snippet,
            date_crawled=preview.date_crawled,
            oembed_html=preview.embed_markup,
            thumbnail_url=preview.thumbnail_url,
        )
    )
    logger.debug("Cached preview for %s", url)
