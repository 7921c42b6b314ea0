# ============================================================================
# FILE: app/api/v1/endpoints/watched.py
# ============================================================================
from fastapi import APIRouter, Depends, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session
from typing import Optional
from app.db.session import get_db
from app.api.dependencies import AuthContext, require_auth
from app.schemas.library import MediaType, SavedItemCreate, WatchedEnvelope, WatchedList
from app.schemas.user import MessageResponse
from app.services.library_service import watched_service

router = APIRouter(dependencies=[Depends(require_auth)])

@router.get("", response_model=WatchedList)
async def get_watched_items(
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth)
):
    items = await run_in_threadpool(watched_service.list_items, db, auth.user_id)
    return {"watched": items}

@router.post("", response_model=WatchedEnvelope, status_code=status.HTTP_201_CREATED)
async def mark_as_watched(
    payload: SavedItemCreate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth)
):
    item = await run_in_threadpool(
        watched_service.add_item, db, auth.user_id, payload.tmdb_id, payload.media_type
    )
    return {"item": item}

@router.delete("/{tmdb_id}", response_model=MessageResponse)
async def unmark_as_watched(
    tmdb_id: int,
    mediaType: Optional[MediaType] = None,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth)
):
    await run_in_threadpool(watched_service.remove_item, db, auth.user_id, tmdb_id, mediaType)
    return {"message": "Removed from watched"}
