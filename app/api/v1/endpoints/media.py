# ============================================================================
# FILE: app/api/v1/endpoints/media.py
# Public metadata proxy (TMDB), no session required
# ============================================================================
from fastapi import APIRouter, Depends, Query, Request
from typing import Literal
from app.core.tmdb_client import TMDBClient

router = APIRouter()

MediaPath = Literal["movie", "tv"]


def get_tmdb_client(request: Request) -> TMDBClient:
    return request.app.state.tmdb

@router.get("/trending")
async def get_trending(
    window: Literal["day", "week"] = "week",
    tmdb: TMDBClient = Depends(get_tmdb_client)
):
    return await tmdb.trending(window)

@router.get("/search")
async def search(
    query: str = Query(..., min_length=1),
    page: int = Query(1, ge=1, le=500),
    tmdb: TMDBClient = Depends(get_tmdb_client)
):
    """Search movies and TV shows"""
    return await tmdb.search(query, page)

@router.get("/{media_type}/popular")
async def get_popular(
    media_type: MediaPath,
    page: int = Query(1, ge=1, le=500),
    tmdb: TMDBClient = Depends(get_tmdb_client)
):
    return await tmdb.popular(media_type, page)

@router.get("/{media_type}/top-rated")
async def get_top_rated(
    media_type: MediaPath,
    page: int = Query(1, ge=1, le=500),
    tmdb: TMDBClient = Depends(get_tmdb_client)
):
    return await tmdb.top_rated(media_type, page)

@router.get("/{media_type}/{tmdb_id}")
async def get_details(
    media_type: MediaPath,
    tmdb_id: int,
    tmdb: TMDBClient = Depends(get_tmdb_client)
):
    return await tmdb.details(media_type, tmdb_id)

@router.get("/tv/{tmdb_id}/season/{season_number}")
async def get_season(
    tmdb_id: int,
    season_number: int,
    tmdb: TMDBClient = Depends(get_tmdb_client)
):
    """Episode list for one season"""
    return await tmdb.season(tmdb_id, season_number)
