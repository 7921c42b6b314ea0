# ============================================================================
# FILE: app/api/v1/endpoints/favorites.py
# ============================================================================
from fastapi import APIRouter, Depends, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session
from typing import Optional
from app.db.session import get_db
from app.api.dependencies import AuthContext, require_auth
from app.schemas.library import FavoriteEnvelope, FavoriteList, MediaType, SavedItemCreate
from app.schemas.user import MessageResponse
from app.services.library_service import favorites_service
import logging

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(require_auth)])

@router.get("", response_model=FavoriteList)
async def get_favorites(
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth)
):
    """Favorites of the current user, newest first"""
    items = await run_in_threadpool(favorites_service.list_items, db, auth.user_id)
    return {"favorites": items}

@router.post("", response_model=FavoriteEnvelope, status_code=status.HTTP_201_CREATED)
async def add_favorite(
    payload: SavedItemCreate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth)
):
    item = await run_in_threadpool(
        favorites_service.add_item, db, auth.user_id, payload.tmdb_id, payload.media_type
    )
    return {"favorite": item}

@router.delete("/{tmdb_id}", response_model=MessageResponse)
async def remove_favorite(
    tmdb_id: int,
    mediaType: Optional[MediaType] = None,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth)
):
    await run_in_threadpool(favorites_service.remove_item, db, auth.user_id, tmdb_id, mediaType)
    return {"message": "Removed from favorites"}
