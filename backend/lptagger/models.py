"""SQLAlchemy ORM models."""

from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from lptagger.database import Base


class Tag(Base):
    __tablename__ = "tags"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), nullable=False, index=True)
    color = Column(String(7), nullable=False, default="#ef4444")
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    def __repr__(self):
        return f"<Tag {self.id} {self.name} {self.color}>"


class LandingPageTag(Base):
    """Assignment of a tag to a landing page."""
    __tablename__ = "landing_page_tags"

    id = Column(Integer, primary_key=True, autoincrement=True)
    landing_page_id = Column(Integer, nullable=False, index=True)
    tag_id = Column(Integer, ForeignKey("tags.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("landing_page_id", "tag_id", name="uq_landing_page_tag"),
    )

    def __repr__(self):
        return f"<LandingPageTag lp={self.landing_page_id} tag={self.tag_id}>"


class CreativeTag(Base):
    """Assignment of a tag to a creative."""
    __tablename__ = "creative_tags"

    id = Column(Integer, primary_key=True, autoincrement=True)
    creative_id = Column(Integer, nullable=False, index=True)
    tag_id = Column(Integer, ForeignKey("tags.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("creative_id", "tag_id", name="uq_creative_tag"),
    )

    def __repr__(self):
        return f"<CreativeTag creative={self.creative_id} tag={self.tag_id}>"
