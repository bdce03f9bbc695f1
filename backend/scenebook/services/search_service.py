import logging
from typing import Any, Dict, Iterable, List, Mapping

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from scenebook.models.character import Character
from scenebook.models.montage import Montage
from scenebook.models.movie import Movie
from scenebook.models.scene import Scene
from scenebook.services.enrichment import characters_by_scene, movie_names, movie_summaries, scenes_by_character
from scenebook.services.search_filters import build_conditions
from scenebook.utils.validation import page_offset

logger = logging.getLogger(__name__)


class SearchService:
    """Filtered search across the acting user's movies."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def search(
        self,
        user_id: str,
        entity: str,
        filters: Iterable[Mapping[str, str]],
        page: int,
        limit: int
    ) -> Dict[str, Any]:
        """
        Run a filtered search for one entity kind.

        Returns:
            {"entity": entity, "results": [...]} with results enriched the
            same way the entity listings are.
        """
        conditions = build_conditions(entity, filters)
        offset = page_offset(page, limit)

        handler = {
            "Movies": self._search_movies,
            "Characters": self._search_characters,
            "Scenes": self._search_scenes,
            "Montages": self._search_montages,
        }[entity]

        results = await handler(user_id, conditions, limit, offset)
        logger.info(
            f"[search] {entity}: {len(conditions)} filter(s), page {page} -> {len(results)} result(s)"
        )
        return {"entity": entity, "results": results}

    async def _search_movies(self, user_id: str, conditions: List[Any], limit: int, offset: int):
        result = await self.db.execute(
            select(Movie)
            .where(Movie.user_id == user_id, *conditions)
            .order_by(Movie.name)
            .limit(limit)
            .offset(offset)
        )
        return await movie_summaries(self.db, list(result.scalars().all()))

    async def _search_characters(self, user_id: str, conditions: List[Any], limit: int, offset: int):
        result = await self.db.execute(
            select(Character)
            .join(Movie, Movie.id == Character.movie_id)
            .where(Movie.user_id == user_id, *conditions)
            .order_by(Movie.name, Character.name)
            .limit(limit)
            .offset(offset)
        )
        characters = list(result.scalars().all())
        scenes = await scenes_by_character(self.db, [c.id for c in characters])
        names = await movie_names(self.db, [c.movie_id for c in characters])

        return [
            {
                **character.to_dict(),
                "scenes": scenes.get(character.id, []),
                "movie_name": names.get(character.movie_id),
            }
            for character in characters
        ]

    async def _search_scenes(self, user_id: str, conditions: List[Any], limit: int, offset: int):
        result = await self.db.execute(
            select(Scene)
            .join(Movie, Movie.id == Scene.movie_id)
            .where(Movie.user_id == user_id, *conditions)
            .order_by(Movie.name, Scene.number)
            .limit(limit)
            .offset(offset)
        )
        scenes = list(result.scalars().all())
        characters = await characters_by_scene(self.db, [s.id for s in scenes])
        names = await movie_names(self.db, [s.movie_id for s in scenes])

        return [
            {
                **scene.to_dict(),
                "characters": characters.get(scene.id, []),
                "movie_name": names.get(scene.movie_id),
            }
            for scene in scenes
        ]

    async def _search_montages(self, user_id: str, conditions: List[Any], limit: int, offset: int):
        result = await self.db.execute(
            select(Montage, Scene.number, Scene.description, Movie.name)
            .join(Scene, Scene.id == Montage.scene_id)
            .join(Movie, Movie.id == Scene.movie_id)
            .where(Movie.user_id == user_id, *conditions)
            .order_by(Movie.name, Scene.number, Montage.seq_number)
            .limit(limit)
            .offset(offset)
        )

        return [
            {
                **montage.to_dict(),
                "scene_number": scene_number,
                "scene_description": scene_description,
                "movie_name": movie_name,
            }
            for montage, scene_number, scene_description, movie_name in result.all()
        ]
