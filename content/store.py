"""Content store: create, update, delete and list content pieces.

Writes run in a single unit of work that also writes the piece's tags and,
when needed, its response URL preview. The preview is fetched before that
unit of work opens, so a slow remote site never holds the database.
"""

import logging
import uuid
from collections.abc import Callable
from datetime import datetime
from typing import Any

from sqlalchemy import Select, delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config import PREVIEW_MAX_AGE_DAYS
from content.models import ContentPiece, PostType, requires_response_url
from content.pagination import PageInfo, compute_page
from content.tags import delete_tags, replace_tags, split_tags
from db.database import get_session, unit_of_work
from db.models import CachedPreview, Content, tag_table
from errors import ContentNotFound, InvalidID, URIConflict, ValidationError
from previews.cache import get_preview, put_preview
from previews.fetcher import fetch_preview
from previews.models import URLPreview, is_stale

logger = logging.getLogger(__name__)

PreviewFetcher = Callable[[str], URLPreview]


def _validate(piece: ContentPiece) -> None:
    if piece.type == PostType.ALL:
        raise ValidationError("post type 'all' is a filter, not a storable type")
    if requires_response_url(piece.type) and not piece.response_to_url:
        raise ValidationError("missing response url")


def _prefetch(url: str, rescrape: bool, fetch: PreviewFetcher | None) -> URLPreview | None:
    """Fetch the preview for url if the cache can't serve it.

    Runs with no session checked out.
    """
    if not url:
        return None
    if not rescrape:
        session = get_session()
        try:
            cached = get_preview(session, url)
        finally:
            session.close()
        if cached is not None and not is_stale(cached, PREVIEW_MAX_AGE_DAYS, datetime.utcnow()):
            logger.debug("Reusing cached preview for %s", url)
            return None
    return (fetch or fetch_preview)(url)


def is_available_uri(session: Session, uri: str) -> bool:
    count = session.execute(
        select(func.count(Content.uri)).where(Content.uri == uri)
    ).scalar_one()
    return count == 0


def _check_available(session: Session, piece: ContentPiece) -> None:
    if not is_available_uri(session, piece.uri):
        raise URIConflict(piece.uri)


def _check_owner(session: Session, piece: ContentPiece) -> None:
    """The piece must exist and its uri must be free or already its own."""
    if session.get(Content, piece.id) is None:
        raise ContentNotFound()
    owner = session.execute(
        select(Content.id).where(Content.uri == piece.uri)
    ).scalar_one_or_none()
    if owner is not None and owner != piece.id:
        raise URIConflict(piece.uri)


def _precheck(piece: ContentPiece, check: Callable[[Session, ContentPiece], None]) -> None:
    """Run check in a short read session, before any preview fetch."""
    session = get_session()
    try:
        check(session, piece)
    finally:
        session.close()


def create_content(piece: ContentPiece, fetch: PreviewFetcher | None = None) -> str:
    """Store a new piece and return its id.

    Raises ValidationError, URIConflict, or FetchError when the response URL
    has no cached preview and fetching one fails. Nothing is written on
    failure. On success ``piece.id`` and ``piece.date_created`` are set.
    """
    _validate(piece)
    _precheck(piece, _check_available)
    preview = _prefetch(piece.response_to_url, False, fetch)

    content_id = str(uuid.uuid4())
    now = datetime.utcnow()
    with unit_of_work() as session:
        # the uri may have been taken while the preview was fetched
        _check_available(session, piece)
        if preview is not None:
            put_preview(session, piece.response_to_url, preview)
        session.add(
            Content(
                id=content_id,
                title=piece.title,
                body=piece.body,
                snippet=piece.snippet,
                date=piece.date,
                date_created=now,
                response_to=piece.response_to_url,
                type=int(piece.type),
                uri=piece.uri,
            )
        )
        try:
            session.flush()
        except IntegrityError as e:
            raise URIConflict(piece.uri) from e
        replace_tags(session, content_id, piece.tags)

    piece.id = content_id
    piece.date_created = now
    logger.info("Created content %s at %r", content_id, piece.uri)
    return content_id


def update_content(
    piece: ContentPiece, rescrape: bool = False, fetch: PreviewFetcher | None = None
) -> None:
    """Rewrite every field of an existing piece and replace its tags.

    The response URL preview is fetched again when rescrape is set or the
    cache has nothing usable for it; otherwise the cached one is kept.
    Raises InvalidID, ValidationError, URIConflict, ContentNotFound or
    FetchError.
    """
    if not piece.id:
        raise InvalidID()
    _validate(piece)
    _precheck(piece, _check_owner)
    preview = _prefetch(piece.response_to_url, rescrape, fetch)

    with unit_of_work() as session:
        _check_owner(session, piece)
        if preview is not None:
            put_preview(session, piece.response_to_url, preview)
        try:
            result = session.execute(
                update(Content)
                .where(Content.id == piece.id)
                .values(
                    title=piece.title,
                    body=piece.body,
                    snippet=piece.snippet,
                    date=piece.date,
                    response_to=piece.response_to_url,
                    uri=piece.uri,
                    type=int(piece.type),
                )
            )
        except IntegrityError as e:
            raise URIConflict(piece.uri) from e
        if result.rowcount != 1:
            raise ContentNotFound()
        replace_tags(session, piece.id, piece.tags)

    logger.info("Updated content %s at %r", piece.id, piece.uri)


def delete_content(piece: ContentPiece) -> None:
    """Delete a piece and its tags. Its cached preview is left alone."""
    with unit_of_work() as session:
        result = session.execute(delete(Content).where(Content.id == piece.id))
        if result.rowcount == 0:
            raise ContentNotFound()
        delete_tags(session, piece.id)

    logger.info("Deleted content %s", piece.id)


def _select_pieces() -> Select[Any]:
    tags = (
        select(func.group_concat(tag_table.c.value, ","))
        .where(tag_table.c.id == Content.id)
        .correlate(Content)
        .scalar_subquery()
    )
    return select(Content, CachedPreview, tags).outerjoin(
        CachedPreview, Content.response_to == CachedPreview.url
    )


def _to_piece(row: Content, cached: CachedPreview | None, tags: str | None) -> ContentPiece:
    preview = None
    if row.response_to and cached is not None:
        preview = URLPreview(
            url=cached.url,
            title=cached.title or "",
            snippet=cached.snippet or "",
            thumbnail_url=cached.thumbnail_url or "",
            embed_markup=cached.oembed_html or "",
            date_crawled=cached.date_crawled,
        )
    return ContentPiece(
        id=row.id,
        uri=row.uri,
        title=row.title or "",
        body=row.body or "",
        snippet=row.snippet or "",
        date=row.date,
        date_created=row.date_created,
        type=PostType(int(row.type or 0)),
        response_to_url=row.response_to or "",
        tags=split_tags(tags),
        response_to_url_preview=preview,
    )


def get_content(session: Session, uri: str) -> ContentPiece:
    """Load the piece at uri with its tags and cached preview."""
    row = session.execute(_select_pieces().where(Content.uri == uri)).first()
    if row is None:
        raise ContentNotFound()
    return _to_piece(*row)


def _listing_filters(page: PageInfo) -> list[Any]:
    filters: list[Any] = [Content.date <= page.date_filter]
    if page.post_type != PostType.ALL:
        filters.append(Content.type == int(page.post_type))
    if page.tag:
        filters.append(
            select(tag_table.c.id)
            .where(tag_table.c.id == Content.id, tag_table.c.value == page.tag)
            .exists()
        )
    return filters


def get_contents(page: PageInfo) -> tuple[list[ContentPiece], PageInfo]:
    """List one page of pieces, newest first, and fill in the page counts.

    The count and the page select run in one transaction on the same
    connection, so the page numbers always match the rows returned.
    """
    session = get_session()
    try:
        with session.begin():
            filters = _listing_filters(page)
            count = session.execute(
                select(func.count(Content.id)).where(*filters)
            ).scalar_one()
            page.item_total = count
            page.item_count = min(count, page.item_limit)
            page.total = compute_page(count, page.item_limit, page.current).total

            rows = session.execute(
                _select_pieces()
                .where(*filters)
                .order_by(Content.date.desc())
                .limit(page.item_limit)
                .offset((page.current - 1) * page.item_limit)
            ).all()
            items = [_to_piece(*row) for row in rows]
    finally:
        session.close()
    return items, page


def create_sample() -> None:
    """Seed the sample post unless its uri is already taken."""
    try:
        create_content(
            ContentPiece(
                title="Sample Post",
                body="<p>I am sample</p>",
                snippet="I am sample.",
                uri="sample",
                tags=["sample"],
            )
        )
    except URIConflict:
        logger.debug("Sample post already exists")
