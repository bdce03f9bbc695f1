"""
Read-side helpers that attach related rows to listing results.

Each helper issues one batched query for a page of results instead of one
query per row.
"""
from collections import defaultdict
from typing import Any, Dict, Iterable, List

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from scenebook.models.character import Character
from scenebook.models.enums import CharacterType
from scenebook.models.movie import Movie
from scenebook.models.scene import Scene
from scenebook.models.scene_character import SceneCharacterMap


async def movie_summaries(db: AsyncSession, movies: List[Movie]) -> List[Dict[str, Any]]:
    """Movies with their main character names and scene count."""
    if not movies:
        return []
    movie_ids = [movie.id for movie in movies]

    main_result = await db.execute(
        select(Character.movie_id, Character.name)
        .where(
            Character.movie_id.in_(movie_ids),
            Character.type == CharacterType.MAIN.value
        )
        .order_by(Character.name)
    )
    main_characters: Dict[str, List[str]] = defaultdict(list)
    for row in main_result.all():
        main_characters[row.movie_id].append(row.name)

    count_result = await db.execute(
        select(Scene.movie_id, func.count(Scene.id))
        .where(Scene.movie_id.in_(movie_ids))
        .group_by(Scene.movie_id)
    )
    scene_counts = {movie_id: count for movie_id, count in count_result.all()}

    return [
        {
            "id": movie.id,
            "name": movie.name,
            "logline": movie.logline,
            "description": movie.description,
            "default_flag": movie.default_flag,
            "main_characters": main_characters.get(movie.id, []),
            "scene_count": scene_counts.get(movie.id, 0),
        }
        for movie in movies
    ]


async def scenes_by_character(db: AsyncSession, character_ids: Iterable[str]) -> Dict[str, List[Dict[str, Any]]]:
    """character id -> scenes it appears in (id, number, description, exp_length)."""
    character_ids = list(character_ids)
    if not character_ids:
        return {}

    result = await db.execute(
        select(
            SceneCharacterMap.char_id,
            Scene.id,
            Scene.number,
            Scene.description,
            Scene.exp_length
        )
        .join(Scene, Scene.id == SceneCharacterMap.scene_id)
        .where(SceneCharacterMap.char_id.in_(character_ids))
        .order_by(Scene.number)
    )

    scenes: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
    for row in result.all():
        scenes[row.char_id].append({
            "id": row.id,
            "number": row.number,
            "description": row.description,
            "exp_length": row.exp_length,
        })
    return scenes


async def characters_by_scene(db: AsyncSession, scene_ids: Iterable[str]) -> Dict[str, List[Dict[str, Any]]]:
    """scene id -> mapped characters (id, name, description, role type)."""
    scene_ids = list(scene_ids)
    if not scene_ids:
        return {}

    result = await db.execute(
        select(
            SceneCharacterMap.scene_id,
            SceneCharacterMap.type,
            Character.id,
            Character.name,
            Character.description
        )
        .join(Character, Character.id == SceneCharacterMap.char_id)
        .where(SceneCharacterMap.scene_id.in_(scene_ids))
        .order_by(Character.name)
    )

    characters: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
    for row in result.all():
        characters[row.scene_id].append({
            "id": row.id,
            "name": row.name,
            "description": row.description,
            "type": row.type,
        })
    return characters


async def movie_names(db: AsyncSession, movie_ids: Iterable[str]) -> Dict[str, str]:
    movie_ids = list(set(movie_ids))
    if not movie_ids:
        return {}
    result = await db.execute(select(Movie.id, Movie.name).where(Movie.id.in_(movie_ids)))
    return {movie_id: name for movie_id, name in result.all()}
