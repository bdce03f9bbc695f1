import logging
from collections import defaultdict
from typing import Any, Dict, List

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from scenebook.models.enums import IntExt, SceneType, SetLoc
from scenebook.models.montage import Montage
from scenebook.models.scene import Scene
from scenebook.services.cascade_service import CascadeDeletionPlanner
from scenebook.services.exceptions import NotFoundError, ValidationError
from scenebook.services.ordering import montage_ordering
from scenebook.services.transaction import atomic
from scenebook.utils.search import icontains, icontains_number
from scenebook.utils.validation import check_code, check_non_negative, check_position, clean_text, page_offset

logger = logging.getLogger(__name__)

TEXT_FIELDS = (
    'location',
    'sub_location',
    'weather',
    'time',
    'description',
    'notes',
)


def _validated_fields(data: Dict[str, Any], creating: bool) -> Dict[str, Any]:
    fields: Dict[str, Any] = {}

    if creating or "ie_flag" in data:
        fields["ie_flag"] = check_code(data.get("ie_flag"), IntExt, "ieFlag", required=True)
    if creating or "sl_flag" in data:
        fields["sl_flag"] = check_code(data.get("sl_flag"), SetLoc, "slFlag", required=True)

    for field in ('exp_length', 'num_extras'):
        if creating or field in data:
            fields[field] = check_non_negative(data.get(field), field)

    for field in TEXT_FIELDS:
        if creating or field in data:
            fields[field] = clean_text(data.get(field)) or ""

    return fields


class MontageService:
    """Sequences of montage scenes, densely numbered within their scene."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_sequence(self, movie_id: str, sequence_id: str) -> Montage:
        result = await self.db.execute(
            select(Montage)
            .join(Scene, Scene.id == Montage.scene_id)
            .where(Scene.movie_id == movie_id, Montage.id == sequence_id)
        )
        sequence = result.scalar_one_or_none()
        if sequence is None:
            raise NotFoundError("Montage Sequence not found.")
        return sequence

    async def _require_scene(self, movie_id: str, scene_id: str) -> Scene:
        result = await self.db.execute(
            select(Scene).where(Scene.movie_id == movie_id, Scene.id == scene_id)
        )
        scene = result.scalar_one_or_none()
        if scene is None:
            raise NotFoundError("Scene not found.")
        return scene

    async def list_montages(
        self,
        movie_id: str,
        page: int,
        limit: int,
        search: str = ""
    ) -> List[Dict[str, Any]]:
        """
        Montage-type scenes of the movie in number order, each carrying its
        sequences in seq_number order.
        """
        offset = page_offset(page, limit)
        query = select(Scene).where(
            Scene.movie_id == movie_id,
            Scene.type == SceneType.MONTAGE.value
        )

        term = (search or "").strip()
        if term:
            query = query.where(
                or_(
                    icontains_number(Scene.number, term),
                    icontains(Scene.location, term),
                    icontains(Scene.sub_location, term),
                    icontains(Scene.description, term),
                )
            )

        result = await self.db.execute(
            query.order_by(Scene.number).limit(limit).offset(offset)
        )
        scenes = list(result.scalars().all())
        if not scenes:
            return []

        sequence_result = await self.db.execute(
            select(Montage)
            .where(Montage.scene_id.in_([scene.id for scene in scenes]))
            .order_by(Montage.seq_number)
        )
        sequences: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
        for sequence in sequence_result.scalars().all():
            sequences[sequence.scene_id].append(sequence.to_dict())

        return [
            {
                "scene_id": scene.id,
                "number": scene.number,
                "description": scene.description,
                "location": scene.location,
                "sub_location": scene.sub_location,
                "montages": sequences.get(scene.id, []),
            }
            for scene in scenes
        ]

    async def create_sequence(self, movie_id: str, data: Dict[str, Any]) -> Montage:
        """Insert a sequence at `data['seq_number']` of its scene, shifting later ones up."""
        scene_id = clean_text(data.get("scene_id"))
        if not scene_id:
            raise ValidationError("Scene ID is required.")
        seq_number = check_position(data.get("seq_number"), "Sequence number")
        fields = _validated_fields(data, creating=True)

        await self._require_scene(movie_id, scene_id)

        async with atomic(self.db, "create montage sequence"):
            await montage_ordering.make_room(self.db, scene_id, seq_number)

            sequence = Montage(scene_id=scene_id, seq_number=seq_number, **fields)
            self.db.add(sequence)
            await self.db.flush()

        await self.db.refresh(sequence)
        logger.info(f"[montages] created {sequence.id} as #{seq_number} in scene {scene_id}")
        return sequence

    async def edit_sequence(self, movie_id: str, sequence_id: str, data: Dict[str, Any]) -> Montage:
        if not sequence_id or not str(sequence_id).strip():
            raise ValidationError("Sequence ID is required.")

        new_number = data.get("seq_number")
        if new_number is not None:
            check_position(new_number, "Sequence number")
        fields = _validated_fields(data, creating=False)

        sequence = await self.get_sequence(movie_id, sequence_id)

        async with atomic(self.db, "edit montage sequence"):
            if new_number is not None:
                await montage_ordering.move(self.db, sequence.scene_id, sequence.id, new_number)
                fields["seq_number"] = new_number

            for field, value in fields.items():
                setattr(sequence, field, value)
            await self.db.flush()

        await self.db.refresh(sequence)
        logger.info(f"[montages] edited {sequence.id} (#{sequence.seq_number})")
        return sequence

    async def delete_sequence(self, movie_id: str, sequence_id: str) -> Dict[str, Any]:
        return await CascadeDeletionPlanner(self.db).delete_montage(movie_id, sequence_id)
