import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from scenebook.models.character import Character
from scenebook.models.enums import RoleType
from scenebook.models.scene_character import SceneCharacterMap
from scenebook.services.exceptions import InvalidMappingError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CharacterRole:
    """One validated (character, role type) entry for a scene."""
    char_id: str
    type: str


class MappingReconciler:
    """
    Replaces the full scene/character mapping set of a scene.

    Runs inside the caller's scene create/edit transaction; it never opens
    or commits one itself.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    @staticmethod
    def prepare(entries: Iterable[Mapping[str, Any]]) -> List[CharacterRole]:
        """
        Filter and validate a candidate list.

        Entries with an empty or null role type mean "not in this scene" and
        are dropped. Anything else must carry a character id and a known
        role type; a character may appear only once.

        Raises:
            InvalidMappingError: on the first malformed entry
        """
        if entries is None:
            return []
        if isinstance(entries, (str, bytes, Mapping)):
            raise InvalidMappingError("Invalid characters data format or type.")

        roles: List[CharacterRole] = []
        seen = set()
        for entry in entries:
            if not isinstance(entry, Mapping):
                raise InvalidMappingError("Invalid characters data format or type.")

            role_type = entry.get("type")
            if role_type is None or str(role_type).strip() == "":
                continue

            char_id = entry.get("id", entry.get("char_id"))
            char_id = str(char_id).strip() if char_id is not None else ""
            role_type = str(role_type).strip()

            if not char_id or role_type not in RoleType.codes():
                raise InvalidMappingError("Invalid characters data format or type.")
            if char_id in seen:
                raise InvalidMappingError(f"Character {char_id} is mapped to the scene more than once.")

            seen.add(char_id)
            roles.append(CharacterRole(char_id=char_id, type=role_type))

        return roles

    async def check_characters(self, movie_id: str, roles: List[CharacterRole]) -> None:
        """All mapped characters must belong to the scene's movie."""
        if not roles:
            return
        wanted = {role.char_id for role in roles}
        result = await self.db.execute(
            select(Character.id).where(
                Character.movie_id == movie_id,
                Character.id.in_(wanted)
            )
        )
        found = set(result.scalars().all())
        missing = wanted - found
        if missing:
            raise InvalidMappingError(
                f"Unknown character(s) for this movie: {', '.join(sorted(missing))}"
            )

    async def replace(self, scene_id: str, roles: List[CharacterRole]) -> List[SceneCharacterMap]:
        """Delete every mapping row of the scene, then insert one row per role."""
        await self.db.execute(
            delete(SceneCharacterMap).where(SceneCharacterMap.scene_id == scene_id)
        )

        rows = [
            SceneCharacterMap(scene_id=scene_id, char_id=role.char_id, type=role.type)
            for role in roles
        ]
        if rows:
            self.db.add_all(rows)
        await self.db.flush()
        return rows

    async def reconcile(
        self,
        scene_id: str,
        movie_id: str,
        entries: Iterable[Mapping[str, Any]]
    ) -> List[SceneCharacterMap]:
        """
        Make the persisted mapping set of `scene_id` exactly equal to `entries`.

        Validation happens before the delete, so an invalid payload never
        leaves a partially replaced set behind. Idempotent for equal input.
        """
        if not scene_id or not str(scene_id).strip():
            raise InvalidMappingError("Scene ID is required.")

        roles = self.prepare(entries)
        await self.check_characters(movie_id, roles)
        rows = await self.replace(scene_id, roles)

        logger.info(f"[mappings] scene {scene_id} now maps {len(rows)} character(s)")
        return rows
