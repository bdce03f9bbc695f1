from datetime import datetime

from sqlalchemy import ForeignKey, String, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from scenebook.models.base import Base, new_id, utc_now


class SceneCharacterMap(Base):
    """
    Many-to-many relationship between scenes and characters, with the role
    the character plays in the scene.

    At most one row per (scene_id, char_id): the whole set for a scene is
    replaced on every save rather than guarded by a constraint.
    """
    __tablename__ = 'scene_char_map'

    # Columns
    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=new_id
    )

    scene_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey('scenes.id'),
        nullable=False,
        index=True
    )

    char_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey('characters.id'),
        nullable=False,
        index=True
    )

    type: Mapped[str] = mapped_column(
        String(1),
        nullable=False,
        comment='D dialogue, N no dialogue, O off-screen, B background'
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        nullable=False
    )

    def __repr__(self) -> str:
        return f"<SceneCharacterMap scene_id={self.scene_id} char_id={self.char_id} type={self.type}>"

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            'scene_id': self.scene_id,
            'char_id': self.char_id,
            'type': self.type
        }
