import logging
from typing import Dict, Any

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from scenebook.models.character import Character
from scenebook.models.enums import DEFAULT_FLAG_NO, DEFAULT_FLAG_YES
from scenebook.models.montage import Montage
from scenebook.models.movie import Movie
from scenebook.models.scene import Scene
from scenebook.models.scene_character import SceneCharacterMap
from scenebook.services.exceptions import NotFoundError, ValidationError
from scenebook.services.ordering import montage_ordering, scene_ordering
from scenebook.services.transaction import atomic

logger = logging.getLogger(__name__)


def _require_id(value: str, label: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{label} ID is required.")
    return str(value).strip()


class CascadeDeletionPlanner:
    """
    Deletes a root entity with everything that only exists because of it.

    Each delete is one transaction: ownership check first, dependent rows
    next (respecting foreign-key direction), the root row, and finally the
    ordering repair of the surviving siblings.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def delete_character(self, movie_id: str, character_id: str) -> Dict[str, Any]:
        character_id = _require_id(character_id, "Character")

        async with atomic(self.db, "delete character"):
            result = await self.db.execute(
                select(Character.id).where(
                    Character.movie_id == movie_id,
                    Character.id == character_id
                )
            )
            if result.first() is None:
                raise NotFoundError("Character not found.")

            unmapped = await self.db.execute(
                delete(SceneCharacterMap).where(SceneCharacterMap.char_id == character_id)
            )
            await self.db.execute(
                delete(Character).where(
                    Character.movie_id == movie_id,
                    Character.id == character_id
                )
            )

        logger.info(
            f"[cascade] deleted character {character_id} and {unmapped.rowcount} scene mapping(s)"
        )
        return {"message": "Character deleted successfully."}

    async def delete_scene(self, movie_id: str, scene_id: str) -> Dict[str, Any]:
        scene_id = _require_id(scene_id, "Scene")

        async with atomic(self.db, "delete scene"):
            await scene_ordering.lock_parent(self.db, movie_id)
            result = await self.db.execute(
                select(Scene.number).where(
                    Scene.movie_id == movie_id,
                    Scene.id == scene_id
                )
            )
            number = result.scalar_one_or_none()
            if number is None:
                raise NotFoundError("Scene not found.")

            await self.db.execute(
                delete(SceneCharacterMap).where(SceneCharacterMap.scene_id == scene_id)
            )
            await self.db.execute(
                delete(Montage).where(Montage.scene_id == scene_id)
            )
            await self.db.execute(
                delete(Scene).where(
                    Scene.movie_id == movie_id,
                    Scene.id == scene_id
                )
            )

            await scene_ordering.close_gap(self.db, movie_id, number)

        logger.info(f"[cascade] deleted scene {scene_id} (#{number}) from movie {movie_id}")
        return {"message": "Scene deleted successfully."}

    async def delete_montage(self, movie_id: str, sequence_id: str) -> Dict[str, Any]:
        sequence_id = _require_id(sequence_id, "Sequence")

        async with atomic(self.db, "delete montage sequence"):
            result = await self.db.execute(
                select(Montage.scene_id)
                .join(Scene, Scene.id == Montage.scene_id)
                .where(
                    Scene.movie_id == movie_id,
                    Montage.id == sequence_id
                )
            )
            scene_id = result.scalar_one_or_none()
            if scene_id is None:
                raise NotFoundError("Montage Sequence not found.")

            # The owning scene never changes; the position may, until the scene is locked
            await montage_ordering.lock_parent(self.db, scene_id)
            seq_number = await montage_ordering.position_of(self.db, sequence_id)
            if seq_number is None:
                raise NotFoundError("Montage Sequence not found.")

            await self.db.execute(delete(Montage).where(Montage.id == sequence_id))
            await montage_ordering.close_gap(self.db, scene_id, seq_number)

        logger.info(
            f"[cascade] deleted sequence {sequence_id} (#{seq_number}) from scene {scene_id}"
        )
        return {"message": "Montage sequence deleted successfully."}

    async def delete_movie(self, user_id: str, movie_id: str) -> Dict[str, Any]:
        movie_id = _require_id(movie_id, "Movie")

        async with atomic(self.db, "delete movie"):
            result = await self.db.execute(
                select(Movie.default_flag).where(
                    Movie.id == movie_id,
                    Movie.user_id == user_id
                )
            )
            default_flag = result.scalar_one_or_none()
            if default_flag is None:
                raise NotFoundError("Movie not found or unauthorized.")

            scene_ids = select(Scene.id).where(Scene.movie_id == movie_id)

            await self.db.execute(delete(Montage).where(Montage.scene_id.in_(scene_ids)))
            await self.db.execute(
                delete(SceneCharacterMap).where(SceneCharacterMap.scene_id.in_(scene_ids))
            )
            await self.db.execute(delete(Character).where(Character.movie_id == movie_id))
            await self.db.execute(delete(Scene).where(Scene.movie_id == movie_id))
            await self.db.execute(delete(Movie).where(Movie.id == movie_id))

            promoted = None
            if default_flag == DEFAULT_FLAG_YES:
                promoted = await self._promote_latest_movie(user_id)

        logger.info(
            f"[cascade] deleted movie {movie_id} for user {user_id}"
            + (f", promoted {promoted} to default" if promoted else "")
        )
        return {"success": True, "message": "Movie deleted successfully.", "new_default_movie_id": promoted}

    async def _promote_latest_movie(self, user_id: str):
        """Make the user's most recently created movie the default, if any remain."""
        result = await self.db.execute(
            select(Movie.id)
            .where(Movie.user_id == user_id)
            .order_by(Movie.created_at.desc())
            .limit(1)
        )
        latest_id = result.scalar_one_or_none()
        if latest_id is None:
            return None

        await self.db.execute(
            update(Movie)
            .where(Movie.user_id == user_id, Movie.id != latest_id)
            .values(default_flag=DEFAULT_FLAG_NO)
        )
        await self.db.execute(
            update(Movie)
            .where(Movie.id == latest_id)
            .values(default_flag=DEFAULT_FLAG_YES)
        )
        return latest_id
