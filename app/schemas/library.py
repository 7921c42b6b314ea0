# ============================================================================
# FILE: app/schemas/library.py
# Request/response schemas for favorites, watchlist, watched,
# continue watching and watchlist history
# ============================================================================
from pydantic import BaseModel, ConfigDict, Field, field_serializer
from typing import List, Literal, Optional
from datetime import datetime, timezone

MediaType = Literal["movie", "tv"]


class SavedItemCreate(BaseModel):
    """Body for adding a title to favorites / watchlist / watched"""
    model_config = ConfigDict(populate_by_name=True)

    tmdb_id: int = Field(alias="tmdbId", gt=0)
    media_type: MediaType = Field(alias="mediaType")


class FavoriteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tmdb_id: int
    media_type: str
    added_at: datetime


class WatchlistItemResponse(FavoriteResponse):
    pass


class WatchedItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tmdb_id: int
    media_type: str
    watched_at: datetime


class FavoriteList(BaseModel):
    favorites: List[FavoriteResponse]


class FavoriteEnvelope(BaseModel):
    favorite: FavoriteResponse


class WatchlistList(BaseModel):
    watchlist: List[WatchlistItemResponse]


class WatchlistEnvelope(BaseModel):
    item: WatchlistItemResponse


class WatchedList(BaseModel):
    watched: List[WatchedItemResponse]


class WatchedEnvelope(BaseModel):
    item: WatchedItemResponse


class ContinueWatchingUpsert(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    tmdb_id: int = Field(alias="tmdbId", gt=0)
    media_type: MediaType = Field(alias="mediaType")
    progress: Optional[int] = None
    season: Optional[int] = None
    episode: Optional[int] = None


class ContinueWatchingResponse(BaseModel):
    """Progress row as the player UI consumes it (camelCase, epoch millis)"""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    tmdb_id: int = Field(serialization_alias="tmdbId")
    media_type: str = Field(serialization_alias="type")
    progress: int
    season: Optional[int] = None
    episode: Optional[int] = None
    last_watched: datetime = Field(serialization_alias="lastWatched")

    @field_serializer("last_watched")
    def _epoch_millis(self, value: datetime) -> int:
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return int(value.timestamp() * 1000)


class ContinueWatchingList(BaseModel):
    items: List[ContinueWatchingResponse]


class ContinueWatchingEnvelope(BaseModel):
    item: ContinueWatchingResponse


class WatchlistHistoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tmdb_id: int
    media_type: Optional[str] = None
    action: str
    action_at: datetime


class WatchlistHistoryList(BaseModel):
    history: List[WatchlistHistoryResponse]
