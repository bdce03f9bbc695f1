"""
Movie management endpoints
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from scenebook.auth.dependencies import get_current_user
from scenebook.core.config import settings
from scenebook.db.base import get_db
from scenebook.middleware.timing import async_timing_context
from scenebook.models.user import User
from scenebook.schemas.movie import (
    MovieCreate,
    MovieDeleteResponse,
    MoviePickerItem,
    MovieResponse,
    MovieSummary,
    MovieUpdate,
)
from scenebook.services.movie_service import MovieService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/movies", tags=["Movies"])


@router.get("", response_model=List[MovieSummary])
async def list_movies(
    page: int = Query(1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE),
    search: str = Query(""),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Movies of the acting user, newest first, with main cast and scene count."""
    async with async_timing_context(f"list_movies page={page}"):
        return await MovieService(db).list_movies(current_user.id, page, limit, search)


@router.get("/all", response_model=List[MoviePickerItem])
async def list_all_movies(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Every movie of the acting user for the movie picker."""
    return await MovieService(db).list_user_movies(current_user.id)


@router.get("/default", response_model=MovieResponse)
async def get_default_movie(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await MovieService(db).get_default_movie(current_user.id)


@router.get("/{movie_id}", response_model=MovieResponse)
async def get_movie(
    movie_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await MovieService(db).get_movie(current_user.id, movie_id)


@router.post("", response_model=MovieResponse, status_code=status.HTTP_201_CREATED)
async def create_movie(
    movie_data: MovieCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Create a movie. It becomes the acting user's default movie."""
    async with async_timing_context("create_movie"):
        movie = await MovieService(db).create_movie(
            current_user.id,
            movie_data.name,
            movie_data.logline,
            movie_data.description
        )
        await db.commit()
    return movie


@router.patch("/{movie_id}", response_model=MovieResponse)
async def update_movie(
    movie_id: str,
    movie_data: MovieUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Edit a movie. The edited movie becomes the acting user's default."""
    movie = await MovieService(db).edit_movie(
        current_user.id,
        movie_id,
        movie_data.name,
        movie_data.logline,
        movie_data.description
    )
    await db.commit()
    return movie


@router.put("/{movie_id}/default", response_model=MovieResponse)
async def set_default_movie(
    movie_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    movie = await MovieService(db).set_default_movie(current_user.id, movie_id)
    await db.commit()
    return movie


@router.delete("/{movie_id}", response_model=MovieDeleteResponse)
async def delete_movie(
    movie_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Delete a movie with all its characters, scenes, mappings and sequences."""
    async with async_timing_context(f"delete_movie {movie_id}"):
        result = await MovieService(db).delete_movie(current_user.id, movie_id)
        await db.commit()
    return result
