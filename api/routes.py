"""API routes for weblog."""

import logging
import secrets
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Header, HTTPException, Query, Response

import config
from api.schemas import ContentPayload, TransactionKind, to_piece
from content.formatting import date_string, tag_string
from content.models import ContentPiece
from content.pagination import PageInfo, parse_page
from content.store import (
    create_content,
    delete_content,
    get_content,
    get_contents,
    update_content,
)
from db.database import get_session
from errors import (
    ContentNotFound,
    FetchError,
    InvalidID,
    URIConflict,
    ValidationError,
    WeblogError,
)
from previews.models import URLPreview, is_fulfilled

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

_ERROR_STATUS: dict[type[WeblogError], int] = {
    URIConflict: 409,
    ContentNotFound: 404,
    InvalidID: 400,
    ValidationError: 400,
    FetchError: 502,
}


def _is_authorized(password: str | None) -> bool:
    if not password:
        return False
    return secrets.compare_digest(password.encode(), config.WEBLOG_PASSWORD.encode())


def _http_error(e: WeblogError) -> HTTPException:
    status = _ERROR_STATUS.get(type(e), 500)
    return HTTPException(status_code=status, detail=str(e))


@router.get("/health")
def health() -> dict[str, str]:
    """Healthcheck endpoint."""
    return {"status": "ok", "service": "weblog"}


@router.get("/posts")
def list_posts(
    page: str | None = Query(default=None),
    limit: str | None = Query(default=None),
    post_type: str | None = Query(default=None, alias="type"),
    tag: str | None = Query(default=None),
    x_weblog_password: str | None = Header(default=None),
) -> dict[str, Any]:
    """One page of posts, newest first. Scheduled posts only when authorized."""
    page_info = parse_page(
        page=page,
        limit=limit,
        post_type=post_type,
        tag=tag,
        include_scheduled=_is_authorized(x_weblog_password),
    )
    items, page_info = get_contents(page_info)
    return {
        "items": [_serialize(p) for p in items],
        "page": _serialize_page(page_info),
    }


@router.get("/posts/{uri}")
def get_post(uri: str, x_weblog_password: str | None = Header(default=None)) -> dict[str, Any]:
    """A single post by uri."""
    session = get_session()
    try:
        piece = get_content(session, uri)
    except ContentNotFound as e:
        raise _http_error(e) from e
    finally:
        session.close()

    if not _is_authorized(x_weblog_password) and piece.date > datetime.utcnow():
        raise HTTPException(status_code=404, detail="content not found")
    return _serialize(piece)


@router.post("/posts")
def write_post(
    payload: ContentPayload,
    response: Response,
    x_weblog_password: str | None = Header(default=None),
) -> dict[str, Any]:
    """Create, update or delete a post, as chosen by ``payload.transaction``.

    201 for a create, 200 for an update or delete.
    """
    if not _is_authorized(x_weblog_password):
        raise HTTPException(status_code=401, detail="not authorized")

    try:
        piece = to_piece(payload)
        if payload.transaction is TransactionKind.CREATE:
            create_content(piece)
            response.status_code = 201
        elif payload.transaction is TransactionKind.UPDATE:
            update_content(piece, rescrape=payload.rescrape)
        elif payload.transaction is TransactionKind.DELETE:
            delete_content(piece)
        else:
            raise ValidationError(f"unknown transaction {payload.transaction!r}")
    except WeblogError as e:
        logger.info("Rejected %s of %r: %s", payload.transaction.value, payload.uri, e)
        raise _http_error(e) from e

    return _serialize(piece)


def _serialize_preview(preview: URLPreview | None) -> dict[str, Any] | None:
    if preview is None:
        return None
    return {
        "url": preview.url,
        "title": preview.title,
        "snippet": preview.snippet,
        "thumbnail_url": preview.thumbnail_url,
        "embed_html": preview.embed_markup,
        "date_crawled": preview.date_crawled.isoformat() if preview.date_crawled else None,
        "fulfilled": is_fulfilled(preview),
    }


def _serialize_page(page: PageInfo) -> dict[str, Any]:
    return {
        "current": page.current,
        "previous": page.previous,
        "next": page.next,
        "total": page.total,
        "item_limit": page.item_limit,
        "item_total": page.item_total,
        "item_count": page.item_count,
        "has_previous": page.has_previous,
        "has_next": page.has_next,
        "type": page.post_type.name.lower(),
        "tag": page.tag,
    }


def _serialize(piece: ContentPiece) -> dict[str, Any]:
    """Serialize a ContentPiece to a dict."""
    return {
        "id": piece.id,
        "uri": piece.uri,
        "title": piece.title,
        "body": piece.body,
        "snippet": piece.snippet,
        "type": piece.type.name.lower(),
        "date": piece.date.isoformat(),
        "date_display": date_string(piece),
        "date_created": piece.date_created.isoformat() if piece.date_created else None,
        "response_to_url": piece.response_to_url,
        "response_to_url_preview": _serialize_preview(piece.response_to_url_preview),
        "tags": piece.tags,
        "tag_string": tag_string(piece),
    }
