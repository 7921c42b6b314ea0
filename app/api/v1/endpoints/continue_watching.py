# ============================================================================
# FILE: app/api/v1/endpoints/continue_watching.py
# ============================================================================
from fastapi import APIRouter, Depends, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.api.dependencies import AuthContext, require_auth
from app.schemas.library import ContinueWatchingEnvelope, ContinueWatchingList, ContinueWatchingUpsert
from app.schemas.user import MessageResponse
from app.services.library_service import continue_watching_service

router = APIRouter(dependencies=[Depends(require_auth)])

@router.get("", response_model=ContinueWatchingList)
async def get_continue_watching(
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth)
):
    """Most recently watched titles with their progress"""
    items = await run_in_threadpool(continue_watching_service.list_items, db, auth.user_id)
    return {"items": items}

@router.post("", response_model=ContinueWatchingEnvelope, status_code=status.HTTP_201_CREATED)
async def upsert_continue_watching(
    payload: ContinueWatchingUpsert,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth)
):
    item = await run_in_threadpool(
        continue_watching_service.upsert,
        db,
        auth.user_id,
        payload.tmdb_id,
        payload.media_type,
        payload.progress,
        payload.season,
        payload.episode,
    )
    return {"item": item}

@router.delete("/{tmdb_id}", response_model=MessageResponse)
async def remove_continue_watching(
    tmdb_id: int,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth)
):
    await run_in_threadpool(continue_watching_service.remove, db, auth.user_id, tmdb_id)
    return {"message": "Removed from continue watching"}
