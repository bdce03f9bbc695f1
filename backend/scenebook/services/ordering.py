"""
Dense ordering for sibling rows.

Scenes are numbered 1..N within their movie and montage sequences 1..N
within their scene. The helpers here keep a sibling set gap-free across
insert, move and delete. They only issue the shift statements; the caller
runs them inside its own transaction (see services.transaction.atomic)
together with the row insert/update/delete they belong to.
"""
import logging
from typing import Any, Optional, Type

from sqlalchemy import and_, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from scenebook.models.base import Base
from scenebook.models.montage import Montage
from scenebook.models.movie import Movie
from scenebook.models.scene import Scene
from scenebook.services.exceptions import NotFoundError, OutOfRangeError
from scenebook.utils.validation import check_position

logger = logging.getLogger(__name__)


class SiblingOrdering:
    """Renumbering protocol for one (model, position column, parent column) triple."""

    def __init__(
        self,
        model: Type[Base],
        position_attr: str,
        parent_attr: str,
        parent_model: Type[Base],
        label: str
    ):
        self.model = model
        self.position_attr = position_attr
        self.parent_attr = parent_attr
        self.parent_model = parent_model
        self.label = label

    @property
    def position(self):
        return getattr(self.model, self.position_attr)

    @property
    def parent(self):
        return getattr(self.model, self.parent_attr)

    async def lock_parent(self, db: AsyncSession, parent_id: Any) -> None:
        """
        Take a row lock on the parent so concurrent renumbering of the same
        sibling set serializes. A no-op on SQLite, which locks the database.
        """
        await db.execute(
            select(self.parent_model.id)
            .where(self.parent_model.id == parent_id)
            .with_for_update()
        )

    async def max_position(self, db: AsyncSession, parent_id: Any) -> int:
        """Highest position among the siblings, 0 for an empty set."""
        result = await db.execute(
            select(func.max(self.position)).where(self.parent == parent_id)
        )
        return result.scalar() or 0

    async def is_taken(self, db: AsyncSession, parent_id: Any, position: int) -> bool:
        result = await db.execute(
            select(self.model.id)
            .where(and_(self.parent == parent_id, self.position == position))
            .limit(1)
        )
        return result.first() is not None

    async def _shift(self, db: AsyncSession, parent_id: Any, delta: int, *criteria) -> int:
        result = await db.execute(
            update(self.model)
            .where(and_(self.parent == parent_id, *criteria))
            .values({self.position_attr: self.position + delta})
        )
        return result.rowcount

    async def make_room(self, db: AsyncSession, parent_id: Any, position: int) -> None:
        """
        Prepare the sibling set for a new row at `position`.

        Positions may be at most max + 1. When the slot is occupied, every
        sibling at or after it moves up by one.
        """
        check_position(position, f"{self.label} number")
        await self.lock_parent(db, parent_id)

        max_existing = await self.max_position(db, parent_id)
        if position > max_existing + 1:
            raise OutOfRangeError(
                position,
                max_existing + 1,
                f"{self.label} number can only be at most '1' greater than the "
                f"current max {self.label.lower()} number ({max_existing})."
            )

        if await self.is_taken(db, parent_id, position):
            shifted = await self._shift(db, parent_id, 1, self.position >= position)
            logger.info(
                f"[{self.label}] opened slot {position} under {parent_id}: shifted {shifted} sibling(s) up"
            )

    async def position_of(self, db: AsyncSession, row_id: Any) -> Optional[int]:
        """The row's stored position, read fresh rather than from the session."""
        result = await db.execute(
            select(self.position).where(self.model.id == row_id)
        )
        return result.scalar_one_or_none()

    async def move(self, db: AsyncSession, parent_id: Any, row_id: Any, new_position: int) -> int:
        """
        Shift the siblings between the row's current position and
        `new_position` so the row can take `new_position`. The caller updates
        the row itself.

        The current position is read after the parent lock is held, so a
        concurrent insert or delete on the same parent cannot skew the window.

        Returns:
            The position the row moved from.
        """
        check_position(new_position, f"{self.label} number")
        await self.lock_parent(db, parent_id)

        old_position = await self.position_of(db, row_id)
        if old_position is None:
            raise NotFoundError(f"{self.label} not found.")

        max_existing = await self.max_position(db, parent_id)
        if new_position > max_existing:
            raise OutOfRangeError(
                new_position,
                max_existing,
                f"{self.label} number cannot be greater than the current max "
                f"{self.label.lower()} number ({max_existing})."
            )

        if new_position == old_position:
            return old_position

        if new_position < old_position:
            # Moving earlier: [new, old) slides down the list
            shifted = await self._shift(
                db, parent_id, 1,
                self.position >= new_position,
                self.position < old_position
            )
        else:
            # Moving later: (old, new] slides up the list
            shifted = await self._shift(
                db, parent_id, -1,
                self.position > old_position,
                self.position <= new_position
            )

        logger.info(
            f"[{self.label}] moved {old_position} -> {new_position} under {parent_id}: shifted {shifted} sibling(s)"
        )
        return old_position

    async def close_gap(self, db: AsyncSession, parent_id: Any, position: int) -> None:
        """Pull every sibling after a removed `position` back by one."""
        await self.lock_parent(db, parent_id)
        shifted = await self._shift(db, parent_id, -1, self.position > position)
        logger.info(
            f"[{self.label}] closed gap at {position} under {parent_id}: shifted {shifted} sibling(s) down"
        )


scene_ordering = SiblingOrdering(
    model=Scene,
    position_attr='number',
    parent_attr='movie_id',
    parent_model=Movie,
    label='Scene'
)

montage_ordering = SiblingOrdering(
    model=Montage,
    position_attr='seq_number',
    parent_attr='scene_id',
    parent_model=Scene,
    label='Sequence'
)
