"""SQLAlchemy models for weblog."""

from datetime import datetime

from sqlalchemy import Column, DateTime, Index, Integer, String, Table, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class Content(Base):
    """A stored post, repost, heart or status."""

    __tablename__ = "content"

    id: Mapped[str] = mapped_column(String, primary_key=True)  # uuid4
    title: Mapped[str] = mapped_column(String, default="", server_default="")
    body: Mapped[str] = mapped_column(Text, default="", server_default="")  # trusted markup
    snippet: Mapped[str] = mapped_column(String, default="", server_default="")
    date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    date_created: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    response_to: Mapped[str] = mapped_column(String, default="", server_default="")
    type: Mapped[int] = mapped_column(Integer, default=0, server_default="0")  # PostType value
    uri: Mapped[str] = mapped_column(String, nullable=False)

    __table_args__ = (
        Index("idx_content_uri", "uri", unique=True),
        Index("idx_content_date", "date"),
    )

    def __repr__(self) -> str:
        return f"<Content(id={self.id!r}, uri={self.uri!r}, title={self.title!r})>"


class CachedPreview(Base):
    """Metadata scraped from a URL some content responds to."""

    __tablename__ = "url_preview"

    url: Mapped[str] = mapped_column(String, primary_key=True)
    title: Mapped[str] = mapped_column(String, default="", server_default="")
    snippet: Mapped[str] = mapped_column(String, default="", server_default="")
    date_crawled: Mapped[datetime | None] = mapped_column(DateTime)
    oembed_html: Mapped[str] = mapped_column(Text, default="", server_default="")
    thumbnail_url: Mapped[str] = mapped_column(String, default="", server_default="")

    def __repr__(self) -> str:
        return f"<CachedPreview(url={self.url!r}, title={self.title!r})>"


# No primary key: one row per (id, value) pair and duplicates are kept.
tag_table = Table(
    "tag",
    Base.metadata,
    Column("id", String, nullable=False),
    Column("value", String, nullable=False),
    Index("idx_tag_id", "id"),
    Index("idx_tag_value", "value"),
)
