from typing import Any, Dict

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from scenebook.models.character import Character
from scenebook.models.enums import CharacterType, SceneType, SetLoc
from scenebook.models.movie import Movie
from scenebook.models.scene import Scene

LONGEST_SCENES = 5


class DashboardService:
    """Overview of one movie: headline details, cast tiers and scene mix."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def dashboard(self, movie: Movie) -> Dict[str, Any]:
        character_result = await self.db.execute(
            select(Character)
            .where(
                Character.movie_id == movie.id,
                Character.type.in_([
                    CharacterType.MAIN.value,
                    CharacterType.PRIMARY.value,
                    CharacterType.SECONDARY.value,
                ])
            )
            .order_by(Character.name)
        )
        tiers = {"main": [], "primary": [], "secondary": []}
        tier_of = {
            CharacterType.MAIN.value: "main",
            CharacterType.PRIMARY.value: "primary",
            CharacterType.SECONDARY.value: "secondary",
        }
        for character in character_result.scalars().all():
            tiers[tier_of[character.type]].append(character.to_dict())

        total = await self.db.scalar(
            select(func.count(Scene.id)).where(Scene.movie_id == movie.id)
        )

        sl_result = await self.db.execute(
            select(Scene.sl_flag, func.count(Scene.id))
            .where(Scene.movie_id == movie.id)
            .group_by(Scene.sl_flag)
        )
        by_sl_flag = {flag: count for flag, count in sl_result.all()}

        type_result = await self.db.execute(
            select(Scene.type, func.count(Scene.id))
            .where(Scene.movie_id == movie.id)
            .group_by(Scene.type)
        )
        by_type = {scene_type: count for scene_type, count in type_result.all()}

        longest_result = await self.db.execute(
            select(Scene)
            .where(Scene.movie_id == movie.id, Scene.exp_length > 0)
            .order_by(Scene.exp_length.desc(), Scene.number)
            .limit(LONGEST_SCENES)
        )

        return {
            "movie_details": {
                "title": movie.name,
                "logline": movie.logline,
                "description": movie.description,
                "main_characters": [c["name"] for c in tiers["main"]],
                "scene_count": total or 0,
            },
            "characters": tiers,
            "scenes": {
                "longest": [scene.to_dict() for scene in longest_result.scalars().all()],
                "set": by_sl_flag.get(SetLoc.SET.value, 0),
                "location": by_sl_flag.get(SetLoc.LOCATION.value, 0),
                "montage": by_type.get(SceneType.MONTAGE.value, 0),
                "dialogue": by_type.get(SceneType.DIALOGUE.value, 0),
                "action": by_type.get(SceneType.ACTION.value, 0),
                "stunt": by_type.get(SceneType.STUNT.value, 0),
            },
        }
