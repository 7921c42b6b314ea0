# ============================================================================
# FILE: app/db/models/library.py
# Per-user library tables: favorites, watchlist, watched, continue watching
# and the watchlist history log
# ============================================================================
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import declared_attr, relationship
from datetime import datetime
from app.db.base import Base


class SavedItemMixin:
    """Shared shape of favorites / watchlist / watched rows"""

    id = Column(Integer, primary_key=True, index=True)
    tmdb_id = Column(Integer, nullable=False)  # TMDB content ID
    media_type = Column(String(10), nullable=False)  # movie | tv

    @declared_attr
    def user_id(cls):
        return Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    @declared_attr
    def __table_args__(cls):
        return (UniqueConstraint("user_id", "tmdb_id", "media_type", name=f"uq_{cls.__tablename__}_item"),)


class Favorite(SavedItemMixin, Base):
    __tablename__ = "favorites"

    added_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="favorites")


class WatchlistItem(SavedItemMixin, Base):
    __tablename__ = "watchlists"

    added_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="watchlist")


class WatchedItem(SavedItemMixin, Base):
    __tablename__ = "watched"

    watched_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="watched")


class ContinueWatching(Base):
    """Playback progress, one row per user per title"""
    __tablename__ = "continue_watching"
    __table_args__ = (UniqueConstraint("user_id", "tmdb_id", name="uq_continue_watching_item"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    tmdb_id = Column(Integer, nullable=False)
    media_type = Column(String(10), nullable=False)
    progress = Column(Integer, nullable=False, default=0)  # percent, 0-100
    season = Column(Integer, nullable=True)
    episode = Column(Integer, nullable=True)
    last_watched = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="continue_watching")


class WatchlistHistory(Base):
    """Append-only log of watchlist adds and removes"""
    __tablename__ = "watchlist_history"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    tmdb_id = Column(Integer, nullable=False)
    media_type = Column(String(10), nullable=True)
    action = Column(String(10), nullable=False)  # added | removed
    action_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
