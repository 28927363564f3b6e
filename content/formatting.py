"""Pure display helpers for content pieces."""

import re
import unicodedata
from datetime import datetime

from content.models import ContentPiece


def date_string(piece: ContentPiece) -> str:
    """e.g. 'March 2024 5 at 02:30PM'."""
    d = piece.date
    return f"{d:%B %Y} {d.day} at {d:%I:%M%p}"


def date_input_string(piece: ContentPiece) -> str:
    return piece.date.strftime("%Y-%m-%d")


def time_input_string(piece: ContentPiece) -> str:
    return piece.date.strftime("%H:%M")


def tag_string(piece: ContentPiece) -> str:
    return ", ".join(piece.tags)


def title_to_uri(title: str) -> str:
    """Convert a title to a URL-friendly slug ('' when nothing survives).

    Accents are dropped ('crème' -> 'creme'); letters of other scripts are
    kept as they are.
    """
    text = unicodedata.normalize("NFKD", title)
    text = "".join(c for c in text if not unicodedata.combining(c))
    text = unicodedata.normalize("NFC", text).lower().strip()
    text = re.sub(r"[\W_]+", "-", text)  # runs of non-word chars to one hyphen
    return text.strip("-")


def derive_uri(title: str, now: datetime) -> str:
    """Slug of the title, or the unix timestamp when the title gives none."""
    slug = title_to_uri(title)
    if slug:
        return slug
    return str(int(now.timestamp()))
