from datetime import datetime
from typing import Optional

from sqlalchemy import ForeignKey, Integer, String, Text, DateTime, Index
from sqlalchemy.orm import Mapped, mapped_column

from scenebook.models.base import Base, new_id, utc_now


class Montage(Base):
    """
    A sequence inside a (montage) scene. `seq_number` is dense within the
    scene, maintained the same way as Scene.number.
    """
    __tablename__ = 'montages'

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

    seq_number: Mapped[int] = mapped_column(
        Integer,
        nullable=False
    )

    ie_flag: Mapped[Optional[str]] = mapped_column(String(2), nullable=True)
    sl_flag: Mapped[Optional[str]] = mapped_column(String(2), nullable=True)

    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    sub_location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    weather: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    time: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    exp_length: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        comment='Expected length in seconds'
    )

    num_extras: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

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

    __table_args__ = (
        Index('ix_montages_scene_seq', 'scene_id', 'seq_number'),
    )

    def __repr__(self) -> str:
        return f"<Montage #{self.seq_number} scene={self.scene_id}>"
