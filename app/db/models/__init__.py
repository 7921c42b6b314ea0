# Import every model so relationships resolve and metadata is complete
from app.db.models.user import User
from app.db.models.library import (
    ContinueWatching,
    Favorite,
    WatchedItem,
    WatchlistHistory,
    WatchlistItem,
)

__all__ = [
    "User",
    "Favorite",
    "WatchlistItem",
    "WatchedItem",
    "ContinueWatching",
    "WatchlistHistory",
]
