# ============================================================================
# FILE: app/api/v1/endpoints/watchlist.py
# ============================================================================
from fastapi import APIRouter, Depends, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session
from typing import Optional
from app.db.session import Database, get_database, get_db
from app.api.dependencies import AuthContext, require_auth
from app.core.tasks import spawn_logged
from app.schemas.library import MediaType, SavedItemCreate, WatchlistEnvelope, WatchlistList
from app.schemas.user import MessageResponse
from app.services.library_service import watchlist_history_service, watchlist_service
import logging

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(require_auth)])

@router.get("", response_model=WatchlistList)
async def get_watchlist(
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth)
):
    items = await run_in_threadpool(watchlist_service.list_items, db, auth.user_id)
    return {"watchlist": items}

@router.post("", response_model=WatchlistEnvelope, status_code=status.HTTP_201_CREATED)
async def add_to_watchlist(
    payload: SavedItemCreate,
    db: Session = Depends(get_db),
    database: Database = Depends(get_database),
    auth: AuthContext = Depends(require_auth)
):
    """
    Add a title to the watchlist
    The history entry is written in the background and never fails this request
    """
    item = await run_in_threadpool(
        watchlist_service.add_item, db, auth.user_id, payload.tmdb_id, payload.media_type
    )
    spawn_logged(
        watchlist_history_service.record,
        database, auth.user_id, payload.tmdb_id, payload.media_type, "added",
        name="watchlist_history.added",
    )
    return {"item": item}

@router.delete("/{tmdb_id}", response_model=MessageResponse)
async def remove_from_watchlist(
    tmdb_id: int,
    mediaType: Optional[MediaType] = None,
    db: Session = Depends(get_db),
    database: Database = Depends(get_database),
    auth: AuthContext = Depends(require_auth)
):
    await run_in_threadpool(watchlist_service.remove_item, db, auth.user_id, tmdb_id, mediaType)
    spawn_logged(
        watchlist_history_service.record,
        database, auth.user_id, tmdb_id, mediaType, "removed",
        name="watchlist_history.removed",
    )
    return {"message": "Removed from watchlist"}
