"""
Scene endpoints. Every route acts on `movie_id` when given, otherwise on the
acting user's default movie.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from scenebook.auth.dependencies import get_acting_movie
from scenebook.core.config import settings
from scenebook.db.base import get_db
from scenebook.middleware.timing import async_timing_context
from scenebook.models.movie import Movie
from scenebook.schemas.common import MessageResponse
from scenebook.schemas.scene import SceneCreate, SceneResponse, SceneUpdate, SceneWithCharacters
from scenebook.services.scene_service import SceneService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/scenes", tags=["Scenes"])


@router.get("", response_model=List[SceneWithCharacters])
async def list_scenes(
    page: int = Query(1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE),
    search: str = Query(""),
    movie: Movie = Depends(get_acting_movie),
    db: AsyncSession = Depends(get_db)
):
    async with async_timing_context(f"list_scenes movie={movie.id} page={page}"):
        return await SceneService(db).list_scenes(movie.id, page, limit, search)


@router.get("/{scene_id}", response_model=SceneWithCharacters)
async def get_scene(
    scene_id: str,
    movie: Movie = Depends(get_acting_movie),
    db: AsyncSession = Depends(get_db)
):
    return await SceneService(db).get_scene_detail(movie.id, scene_id)


@router.post("", response_model=SceneResponse, status_code=status.HTTP_201_CREATED)
async def create_scene(
    scene_data: SceneCreate,
    movie: Movie = Depends(get_acting_movie),
    db: AsyncSession = Depends(get_db)
):
    """
    Insert a scene at `number`. Scenes at or after that number move up by
    one; `characters` becomes the scene's mapping set.
    """
    fields = scene_data.model_dump(exclude={"characters"})
    characters = [entry.model_dump() for entry in scene_data.characters]

    async with async_timing_context(f"create_scene movie={movie.id} number={scene_data.number}"):
        scene = await SceneService(db).create_scene(movie.id, fields, characters)
        await db.commit()
    return scene


@router.patch("/{scene_id}", response_model=SceneResponse)
async def update_scene(
    scene_id: str,
    scene_data: SceneUpdate,
    movie: Movie = Depends(get_acting_movie),
    db: AsyncSession = Depends(get_db)
):
    """
    Partially update a scene. A new `number` moves it and renumbers the
    scenes in between; `characters` replaces the mapping set.
    """
    fields = scene_data.model_dump(exclude_unset=True, exclude={"characters"})
    characters = [entry.model_dump() for entry in scene_data.characters]

    async with async_timing_context(f"update_scene {scene_id}"):
        scene = await SceneService(db).edit_scene(movie.id, scene_id, fields, characters)
        await db.commit()
    return scene


@router.delete("/{scene_id}", response_model=MessageResponse)
async def delete_scene(
    scene_id: str,
    movie: Movie = Depends(get_acting_movie),
    db: AsyncSession = Depends(get_db)
):
    """Delete a scene with its mappings and sequences; later scenes move down."""
    async with async_timing_context(f"delete_scene {scene_id}"):
        result = await SceneService(db).delete_scene(movie.id, scene_id)
        await db.commit()
    return result
