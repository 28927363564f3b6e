"""Fetch a URL and extract an Open Graph / oEmbed preview."""

import logging
from datetime import datetime
from typing import Any
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup, ParserRejectedMarkup

from config import PREVIEW_FETCH_TIMEOUT, PREVIEW_USER_AGENT
from errors import FetchError
from previews.models import URLPreview

logger = logging.getLogger(__name__)

_OEMBED_TYPES = ("application/json+oembed", "text/json+oembed")


def _get(url: str) -> requests.Response:
    resp = requests.get(
        url,
        headers={"User-Agent": PREVIEW_USER_AGENT},
        timeout=PREVIEW_FETCH_TIMEOUT,
    )
    resp.raise_for_status()
    return resp


def _meta_content(soup: BeautifulSoup, **attrs: str) -> str:
    tag = soup.find("meta", attrs=attrs)
    if tag is None:
        return ""
    return (tag.get("content") or "").strip()


def _page_title(soup: BeautifulSoup) -> str:
    if soup.title is None or soup.title.string is None:
        return ""
    return soup.title.string.strip()


def _open_graph(soup: BeautifulSoup) -> dict[str, Any] | None:
    """Collect og:* properties. None when the page has none at all."""
    og: dict[str, Any] = {"images": []}
    found = False
    for tag in soup.find_all("meta"):
        prop = tag.get("property") or ""
        if not prop.startswith("og:"):
            continue
        found = True
        value = (tag.get("content") or "").strip()
        if prop == "og:image":
            if value:
                og["images"].append(value)
        else:
            og.setdefault(prop[3:], value)
    return og if found else None


def _oembed(soup: BeautifulSoup, page_url: str) -> dict[str, Any] | None:
    """Resolve the page's oEmbed discovery link, if it has one."""
    link = None
    for candidate in soup.find_all("link", href=True):
        if (candidate.get("type") or "").lower() in _OEMBED_TYPES:
            link = candidate
            break
    if link is None:
        return None

    endpoint = urljoin(page_url, link["href"])
    try:
        data = _get(endpoint).json()
    except (requests.RequestException, ValueError) as e:
        logger.warning("oEmbed lookup failed for %s: %s", endpoint, e)
        return None
    if not isinstance(data, dict):
        logger.warning("oEmbed response for %s is not an object", endpoint)
        return None
    return data


def _soup(url: str, html: str) -> BeautifulSoup:
    try:
        return BeautifulSoup(html, "lxml")
    except ParserRejectedMarkup as e:
        raise FetchError(url, f"unparsable document: {e}") from e


def _build_preview(url: str, soup: BeautifulSoup, oembed: dict[str, Any] | None) -> URLPreview:
    """Build a preview from a fetched document.

    Precedence: page <title>/description first; oEmbed html and thumbnail
    when present, else the first Open Graph image; finally, when the page
    carries any Open Graph metadata, og:url, og:title and og:description
    override url, title and snippet.
    """
    preview = URLPreview(
        url=url,
        title=_page_title(soup),
        snippet=_meta_content(soup, name="description"),
        date_crawled=datetime.utcnow(),
    )

    og = _open_graph(soup)
    if oembed is not None:
        if oembed.get("html"):
            preview.embed_markup = str(oembed["html"])
        if oembed.get("thumbnail_url"):
            preview.thumbnail_url = str(oembed["thumbnail_url"])
    elif og is not None and og["images"]:
        preview.thumbnail_url = og["images"][0]

    if og is not None:
        preview.url = og.get("url", "")
        preview.title = og.get("title", "")
        preview.snippet = og.get("description", "")

    return preview


def parse_preview(url: str, html: str, oembed: dict[str, Any] | None = None) -> URLPreview:
    return _build_preview(url, _soup(url, html), oembed)


def fetch_preview(url: str) -> URLPreview:
    """GET url and extract its preview. Raises FetchError; never retries."""
    logger.info("Fetching preview for %s", url)
    try:
        resp = _get(url)
    except requests.RequestException as e:
        raise FetchError(url, str(e)) from e

    html = resp.text
    if not html.strip():
        raise FetchError(url, "empty response body")

    soup = _soup(url, html)
    preview = _build_preview(url, soup, _oembed(soup, url))
    logger.info("Fetched preview for %s: %r", url, preview.title)
    return preview
