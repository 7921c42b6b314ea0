# ============================================================================
# FILE: app/api/v1/router.py
# ============================================================================
from fastapi import APIRouter
from app.api.v1.endpoints import (
    auth,
    continue_watching,
    favorites,
    media,
    watched,
    watchlist,
    watchlist_history,
)

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(favorites.router, prefix="/favorites", tags=["favorites"])
api_router.include_router(watchlist.router, prefix="/watchlist", tags=["watchlist"])
api_router.include_router(watched.router, prefix="/watched", tags=["watched"])
api_router.include_router(continue_watching.router, prefix="/continue-watching", tags=["continue-watching"])
api_router.include_router(watchlist_history.router, prefix="/watchlist-history", tags=["watchlist-history"])
api_router.include_router(media.router, prefix="/media", tags=["media"])
