# ============================================================================
# FILE: app/services/library_service.py
# Per-user library operations. Every query is scoped to the caller's user id
# ============================================================================
from datetime import datetime, timedelta
from typing import List, Optional, Type
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.core.errors import UserNotFoundError, ValidationError
from app.db.models.library import (
    ContinueWatching,
    Favorite,
    WatchedItem,
    WatchlistHistory,
    WatchlistItem,
)
from app.db.models.user import User
from app.db.session import Database
import logging

logger = logging.getLogger(__name__)

CONTINUE_WATCHING_LIMIT = 20
HISTORY_WINDOW_DAYS = 30


def _raise_integrity_error(db: Session, user_id: int, error: IntegrityError) -> None:
    """
    Classify a constraint failure that was not a duplicate row.
    The session gate trusts the token alone, so the owner may have been
    deleted since it was issued.
    """
    if db.get(User, user_id) is None:
        logger.info(f"Write rejected, user {user_id} no longer exists")
        raise UserNotFoundError() from error
    raise error


class SavedItemService:
    """Add / list / remove for tables keyed by (user, tmdb id, media type)"""

    def __init__(self, model: Type, order_column: str):
        self.model = model
        self.order_column = order_column

    def list_items(self, db: Session, user_id: int) -> List:
        order = getattr(self.model, self.order_column)
        return db.query(self.model).filter(
            self.model.user_id == user_id
        ).order_by(order.desc(), self.model.id.desc()).all()

    def get_item(self, db: Session, user_id: int, tmdb_id: int, media_type: str):
        return db.query(self.model).filter(
            self.model.user_id == user_id,
            self.model.tmdb_id == tmdb_id,
            self.model.media_type == media_type
        ).first()

    def add_item(self, db: Session, user_id: int, tmdb_id: int, media_type: str):
        """Add a title; adding one that is already saved returns the existing row"""
        existing = self.get_item(db, user_id, tmdb_id, media_type)
        if existing:
            logger.info(f"{self.model.__tablename__}: {media_type}/{tmdb_id} already saved for user {user_id}")
            return existing

        item = self.model(user_id=user_id, tmdb_id=tmdb_id, media_type=media_type)
        try:
            db.add(item)
            db.commit()
        except IntegrityError as e:
            db.rollback()
            existing = self.get_item(db, user_id, tmdb_id, media_type)
            if existing is None:
                _raise_integrity_error(db, user_id, e)
            # A concurrent request inserted the same row first
            return existing
        except Exception as e:
            db.rollback()
            logger.error(f"Error adding to {self.model.__tablename__}: {e}")
            raise
        db.refresh(item)
        logger.info(f"{self.model.__tablename__}: added {media_type}/{tmdb_id} for user {user_id}")
        return item

    def remove_item(self, db: Session, user_id: int, tmdb_id: int, media_type: Optional[str] = None) -> int:
        """Remove a title; without media_type every entry for tmdb_id goes"""
        query = db.query(self.model).filter(
            self.model.user_id == user_id,
            self.model.tmdb_id == tmdb_id
        )
        if media_type is not None:
            query = query.filter(self.model.media_type == media_type)

        try:
            removed = query.delete(synchronize_session=False)
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(f"Error removing from {self.model.__tablename__}: {e}")
            raise
        return removed


class ContinueWatchingService:
    """Playback progress, one row per user per title"""

    def list_items(self, db: Session, user_id: int, limit: int = CONTINUE_WATCHING_LIMIT) -> List[ContinueWatching]:
        return db.query(ContinueWatching).filter(
            ContinueWatching.user_id == user_id
        ).order_by(ContinueWatching.last_watched.desc(), ContinueWatching.id.desc()).limit(limit).all()

    def upsert(
        self,
        db: Session,
        user_id: int,
        tmdb_id: int,
        media_type: str,
        progress: Optional[int] = None,
        season: Optional[int] = None,
        episode: Optional[int] = None,
    ) -> ContinueWatching:
        if progress is not None and not 0 <= progress <= 100:
            raise ValidationError("progress must be between 0 and 100")

        item = self._get(db, user_id, tmdb_id)

        try:
            if item is None:
                item = ContinueWatching(user_id=user_id, tmdb_id=tmdb_id)
                db.add(item)
            self._apply(item, media_type, progress, season, episode)
            db.commit()
        except IntegrityError as e:
            db.rollback()
            item = self._get(db, user_id, tmdb_id)
            if item is None:
                _raise_integrity_error(db, user_id, e)
            # Lost an insert race for the same title; apply ours once as an update
            self._apply(item, media_type, progress, season, episode)
            try:
                db.commit()
            except Exception:
                db.rollback()
                raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error saving progress: {e}")
            raise
        db.refresh(item)
        return item

    def _get(self, db: Session, user_id: int, tmdb_id: int) -> Optional[ContinueWatching]:
        return db.query(ContinueWatching).filter(
            ContinueWatching.user_id == user_id,
            ContinueWatching.tmdb_id == tmdb_id
        ).first()

    @staticmethod
    def _apply(item: ContinueWatching, media_type: str, progress: Optional[int], season: Optional[int], episode: Optional[int]) -> None:
        item.media_type = media_type
        item.progress = progress or 0
        item.season = season
        item.episode = episode
        item.last_watched = datetime.utcnow()

    def remove(self, db: Session, user_id: int, tmdb_id: int) -> int:
        try:
            removed = db.query(ContinueWatching).filter(
                ContinueWatching.user_id == user_id,
                ContinueWatching.tmdb_id == tmdb_id
            ).delete(synchronize_session=False)
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(f"Error removing progress: {e}")
            raise
        return removed


class WatchlistHistoryService:
    """Append-only log of watchlist adds and removes"""

    def list_recent(self, db: Session, user_id: int, days: int = HISTORY_WINDOW_DAYS) -> List[WatchlistHistory]:
        since = datetime.utcnow() - timedelta(days=days)
        return db.query(WatchlistHistory).filter(
            WatchlistHistory.user_id == user_id,
            WatchlistHistory.action_at >= since
        ).order_by(WatchlistHistory.action_at.desc(), WatchlistHistory.id.desc()).all()

    def record(self, database: Database, user_id: int, tmdb_id: int, media_type: Optional[str], action: str) -> None:
        """
        Write one history row on its own session.
        Runs detached from the request, so it cannot share the request's session.
        """
        db = database.session()
        try:
            db.add(WatchlistHistory(user_id=user_id, tmdb_id=tmdb_id, media_type=media_type, action=action))
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()


# Create singleton instances
favorites_service = SavedItemService(Favorite, "added_at")
watchlist_service = SavedItemService(WatchlistItem, "added_at")
watched_service = SavedItemService(WatchedItem, "watched_at")
continue_watching_service = ContinueWatchingService()
watchlist_history_service = WatchlistHistoryService()
