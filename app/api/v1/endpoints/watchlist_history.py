# ============================================================================
# FILE: app/api/v1/endpoints/watchlist_history.py
# ============================================================================
from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.api.dependencies import AuthContext, require_auth
from app.schemas.library import WatchlistHistoryList
from app.services.library_service import watchlist_history_service

router = APIRouter(dependencies=[Depends(require_auth)])

@router.get("", response_model=WatchlistHistoryList)
async def get_watchlist_history(
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth)
):
    """Watchlist adds and removes from the last 30 days"""
    history = await run_in_threadpool(watchlist_history_service.list_recent, db, auth.user_id)
    return {"history": history}
