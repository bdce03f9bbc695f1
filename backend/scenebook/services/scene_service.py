import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from scenebook.models.enums import Cost, IntExt, Relevance, SceneType, SetLoc
from scenebook.models.scene import Scene
from scenebook.services.cascade_service import CascadeDeletionPlanner
from scenebook.services.enrichment import characters_by_scene
from scenebook.services.exceptions import NotFoundError, ValidationError
from scenebook.services.mapping_service import MappingReconciler
from scenebook.services.ordering import scene_ordering
from scenebook.services.transaction import atomic
from scenebook.utils.search import icontains, icontains_number
from scenebook.utils.validation import check_code, check_non_negative, check_position, clean_text, page_offset

logger = logging.getLogger(__name__)

TEXT_FIELDS = (
    'act',
    'location',
    'sub_location',
    'weather',
    'time',
    'description',
) + Scene.NOTE_FIELDS

CODE_FIELDS = (
    # field, enum, label, required on create
    ('ie_flag', IntExt, 'ieFlag', True),
    ('sl_flag', SetLoc, 'slFlag', True),
    ('type', SceneType, 'scene type', True),
    ('relevance_quotient', Relevance, 'relevanceQuotient', False),
    ('cost_quotient', Cost, 'costquotient', False),
)


def _validated_fields(data: Dict[str, Any], creating: bool) -> Dict[str, Any]:
    """Validate a create or partial edit payload; `number` is handled by the caller."""
    fields: Dict[str, Any] = {}

    for field, enum_cls, label, required in CODE_FIELDS:
        if creating or field in data:
            fields[field] = check_code(data.get(field), enum_cls, label, required=required)

    for field in ('exp_length', 'num_extras'):
        if creating or field in data:
            fields[field] = check_non_negative(data.get(field), field)

    for field in TEXT_FIELDS:
        if creating or field in data:
            value = clean_text(data.get(field))
            if field == "act":
                fields[field] = value or None
            else:
                fields[field] = value or ""

    return fields


class SceneService:
    """Scenes of one movie: dense numbering plus character mappings."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.mappings = MappingReconciler(db)

    async def get_scene(self, movie_id: str, scene_id: str) -> Scene:
        result = await self.db.execute(
            select(Scene).where(Scene.movie_id == movie_id, Scene.id == scene_id)
        )
        scene = result.scalar_one_or_none()
        if scene is None:
            raise NotFoundError("Scene not found.")
        return scene

    async def list_scenes(
        self,
        movie_id: str,
        page: int,
        limit: int,
        search: str = ""
    ) -> List[Dict[str, Any]]:
        """Scenes in number order, each with its mapped characters."""
        offset = page_offset(page, limit)
        query = select(Scene).where(Scene.movie_id == movie_id)

        term = (search or "").strip()
        if term:
            query = query.where(
                or_(
                    icontains_number(Scene.number, term),
                    icontains(Scene.location, term),
                    icontains(Scene.sub_location, term),
                    icontains(Scene.description, term),
                    *[icontains(getattr(Scene, note), term) for note in Scene.NOTE_FIELDS]
                )
            )

        result = await self.db.execute(
            query.order_by(Scene.number).limit(limit).offset(offset)
        )
        scenes = list(result.scalars().all())
        characters = await characters_by_scene(self.db, [s.id for s in scenes])

        return [
            {**scene.to_dict(), "characters": characters.get(scene.id, [])}
            for scene in scenes
        ]

    async def get_scene_detail(self, movie_id: str, scene_id: str) -> Dict[str, Any]:
        scene = await self.get_scene(movie_id, scene_id)
        characters = await characters_by_scene(self.db, [scene.id])
        return {**scene.to_dict(), "characters": characters.get(scene.id, [])}

    async def create_scene(
        self,
        movie_id: str,
        data: Dict[str, Any],
        characters: Optional[Iterable[Mapping[str, Any]]] = None
    ) -> Scene:
        """
        Insert a scene at `data['number']`, shifting later scenes up, and
        store its character mappings. One transaction.
        """
        number = check_position(data.get("number"), "Scene number")
        fields = _validated_fields(data, creating=True)
        characters = list(characters or [])
        MappingReconciler.prepare(characters)

        async with atomic(self.db, "create scene"):
            await scene_ordering.make_room(self.db, movie_id, number)

            scene = Scene(movie_id=movie_id, number=number, **fields)
            self.db.add(scene)
            await self.db.flush()

            await self.mappings.reconcile(scene.id, movie_id, characters)

        await self.db.refresh(scene)
        logger.info(f"[scenes] created {scene.id} as #{number} in movie {movie_id}")
        return scene

    async def edit_scene(
        self,
        movie_id: str,
        scene_id: str,
        data: Dict[str, Any],
        characters: Optional[Iterable[Mapping[str, Any]]] = None
    ) -> Scene:
        """
        Update a scene, moving it to `data['number']` when that changes, and
        replace its character mappings with `characters`. One transaction.
        """
        if not scene_id or not str(scene_id).strip():
            raise ValidationError("Scene ID is required.")

        new_number = data.get("number")
        if new_number is not None:
            check_position(new_number, "Scene number")
        fields = _validated_fields(data, creating=False)
        characters = list(characters or [])
        MappingReconciler.prepare(characters)

        scene = await self.get_scene(movie_id, scene_id)

        async with atomic(self.db, "edit scene"):
            if new_number is not None:
                await scene_ordering.move(self.db, movie_id, scene.id, new_number)
                fields["number"] = new_number

            for field, value in fields.items():
                setattr(scene, field, value)
            await self.db.flush()

            await self.mappings.reconcile(scene.id, movie_id, characters)

        await self.db.refresh(scene)
        logger.info(f"[scenes] edited {scene.id} (#{scene.number})")
        return scene

    async def delete_scene(self, movie_id: str, scene_id: str) -> Dict[str, Any]:
        return await CascadeDeletionPlanner(self.db).delete_scene(movie_id, scene_id)
