import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import asc, case, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from scenebook.models.character import Character
from scenebook.models.enums import CHARACTER_TYPE_RANK, CharacterType, Gender
from scenebook.models.movie import Movie
from scenebook.models.scene import Scene
from scenebook.models.scene_character import SceneCharacterMap
from scenebook.services.cascade_service import CascadeDeletionPlanner
from scenebook.services.enrichment import scenes_by_character
from scenebook.services.exceptions import NotFoundError, ValidationError
from scenebook.utils.search import icontains
from scenebook.utils.validation import (
    check_age_range,
    check_code,
    check_non_negative,
    clean_text,
    page_offset,
    require_text,
)

logger = logging.getLogger(__name__)

# Sort key: Main, Primary, Secondary, Tertiary, Other, then anything else
TYPE_RANK = case(CHARACTER_TYPE_RANK, value=Character.type, else_=6)


def _validated_fields(data: Dict[str, Any], existing: Optional[Character] = None) -> Dict[str, Any]:
    """
    Validate a create (existing is None) or partial edit payload and return
    the column values to write.
    """
    fields: Dict[str, Any] = {}
    creating = existing is None

    if creating or "name" in data:
        fields["name"] = require_text(data.get("name"), "Character name")
    if creating or "gender" in data:
        fields["gender"] = check_code(data.get("gender"), Gender, "gender", required=True)
    if creating or "type" in data:
        fields["type"] = check_code(data.get("type"), CharacterType, "character type", required=True)

    lower = data["lower_age"] if "lower_age" in data else (existing.lower_age if existing else None)
    upper = data["upper_age"] if "upper_age" in data else (existing.upper_age if existing else None)
    lower, upper = check_age_range(lower, upper)
    if creating or "lower_age" in data:
        fields["lower_age"] = lower
    if creating or "upper_age" in data:
        fields["upper_age"] = upper

    if creating or "exp_screen_time" in data:
        fields["exp_screen_time"] = check_non_negative(data.get("exp_screen_time"), "exp_screen_time")
    for text_field in ("description", "notes"):
        if creating or text_field in data:
            fields[text_field] = clean_text(data.get(text_field)) or ""

    return fields


class CharacterService:
    """Characters of one movie."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_character(self, movie_id: str, character_id: str) -> Character:
        result = await self.db.execute(
            select(Character).where(
                Character.movie_id == movie_id,
                Character.id == character_id
            )
        )
        character = result.scalar_one_or_none()
        if character is None:
            raise NotFoundError("Character not found.")
        return character

    async def list_characters(
        self,
        movie_id: str,
        page: int,
        limit: int,
        search: str = ""
    ) -> List[Dict[str, Any]]:
        """Characters ordered by importance then name, each with its scenes."""
        offset = page_offset(page, limit)
        query = select(Character).where(Character.movie_id == movie_id)

        term = (search or "").strip()
        if term:
            query = query.where(
                or_(
                    icontains(Character.name, term),
                    icontains(Character.description, term),
                    icontains(Character.notes, term),
                )
            )

        result = await self.db.execute(
            query.order_by(TYPE_RANK, asc(Character.name)).limit(limit).offset(offset)
        )
        characters = list(result.scalars().all())
        scenes = await scenes_by_character(self.db, [c.id for c in characters])

        return [
            {**character.to_dict(), "scenes": scenes.get(character.id, [])}
            for character in characters
        ]

    async def scene_characters(
        self,
        movie_id: Optional[str],
        scene_id: Optional[str],
        user_id: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """
        Every character of the movie with its role type in `scene_id`
        ("" when not mapped, or when no scene is given). With `user_id`, the
        scene must belong to one of that user's movies.
        """
        if not movie_id and not scene_id:
            raise ValidationError("Missing movie_id and scene_id.")

        if scene_id:
            query = select(Scene.movie_id).where(Scene.id == scene_id)
            if user_id:
                query = query.join(Movie, Movie.id == Scene.movie_id).where(Movie.user_id == user_id)
            result = await self.db.execute(query)
            scene_movie_id = result.scalar_one_or_none()
            if scene_movie_id is None or (movie_id and scene_movie_id != movie_id):
                raise NotFoundError("Scene not found.")
            movie_id = scene_movie_id

        result = await self.db.execute(
            select(Character.id, Character.name)
            .where(Character.movie_id == movie_id)
            .order_by(TYPE_RANK, asc(Character.name))
        )
        characters = result.all()

        types: Dict[str, str] = {}
        if scene_id:
            mapping_result = await self.db.execute(
                select(SceneCharacterMap.char_id, SceneCharacterMap.type)
                .where(SceneCharacterMap.scene_id == scene_id)
            )
            types = {char_id: role for char_id, role in mapping_result.all()}

        return [
            {"id": row.id, "name": row.name, "type": types.get(row.id, "")}
            for row in characters
        ]

    async def create_character(self, movie_id: str, data: Dict[str, Any]) -> Character:
        fields = _validated_fields(data)

        character = Character(movie_id=movie_id, **fields)
        self.db.add(character)
        await self.db.flush()
        await self.db.refresh(character)

        logger.info(f"[characters] created {character.id} ({character.name}) in movie {movie_id}")
        return character

    async def edit_character(self, movie_id: str, character_id: str, data: Dict[str, Any]) -> Character:
        if not character_id or not str(character_id).strip():
            raise ValidationError("Character ID is required.")

        character = await self.get_character(movie_id, character_id)
        fields = _validated_fields(data, existing=character)

        for field, value in fields.items():
            setattr(character, field, value)
        await self.db.flush()
        await self.db.refresh(character)

        logger.info(f"[characters] edited {character.id}")
        return character

    async def delete_character(self, movie_id: str, character_id: str) -> Dict[str, Any]:
        return await CascadeDeletionPlanner(self.db).delete_character(movie_id, character_id)
