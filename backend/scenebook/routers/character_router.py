"""
Character endpoints. Every route acts on `movie_id` when given, otherwise on
the acting user's default movie.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from scenebook.auth.dependencies import get_acting_movie, get_current_user
from scenebook.core.config import settings
from scenebook.db.base import get_db
from scenebook.middleware.timing import async_timing_context
from scenebook.models.movie import Movie
from scenebook.models.user import User
from scenebook.schemas.character import (
    CharacterCreate,
    CharacterResponse,
    CharacterUpdate,
    CharacterWithScenes,
    SceneCharacterRole,
)
from scenebook.schemas.common import MessageResponse
from scenebook.services.character_service import CharacterService
from scenebook.services.movie_service import MovieService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/characters", tags=["Characters"])


@router.get("", response_model=List[CharacterWithScenes])
async def list_characters(
    page: int = Query(1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE),
    search: str = Query(""),
    movie: Movie = Depends(get_acting_movie),
    db: AsyncSession = Depends(get_db)
):
    async with async_timing_context(f"list_characters movie={movie.id} page={page}"):
        return await CharacterService(db).list_characters(movie.id, page, limit, search)


@router.get("/for-scene", response_model=List[SceneCharacterRole])
async def list_scene_characters(
    movie_id: Optional[str] = Query(None),
    scene_id: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Every character of the movie with its role type in `scene_id`, for the
    scene form. The movie is taken from the scene when only scene_id is given.
    """
    if movie_id:
        await MovieService(db).get_movie(current_user.id, movie_id)
    return await CharacterService(db).scene_characters(movie_id, scene_id, current_user.id)


@router.get("/{character_id}", response_model=CharacterResponse)
async def get_character(
    character_id: str,
    movie: Movie = Depends(get_acting_movie),
    db: AsyncSession = Depends(get_db)
):
    return await CharacterService(db).get_character(movie.id, character_id)


@router.post("", response_model=CharacterResponse, status_code=status.HTTP_201_CREATED)
async def create_character(
    character_data: CharacterCreate,
    movie: Movie = Depends(get_acting_movie),
    db: AsyncSession = Depends(get_db)
):
    character = await CharacterService(db).create_character(movie.id, character_data.model_dump())
    await db.commit()
    return character


@router.patch("/{character_id}", response_model=CharacterResponse)
async def update_character(
    character_id: str,
    character_data: CharacterUpdate,
    movie: Movie = Depends(get_acting_movie),
    db: AsyncSession = Depends(get_db)
):
    character = await CharacterService(db).edit_character(
        movie.id,
        character_id,
        character_data.model_dump(exclude_unset=True)
    )
    await db.commit()
    return character


@router.delete("/{character_id}", response_model=MessageResponse)
async def delete_character(
    character_id: str,
    movie: Movie = Depends(get_acting_movie),
    db: AsyncSession = Depends(get_db)
):
    result = await CharacterService(db).delete_character(movie.id, character_id)
    await db.commit()
    return result
