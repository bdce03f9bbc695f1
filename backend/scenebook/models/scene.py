from datetime import datetime
from typing import Optional

from sqlalchemy import ForeignKey, Integer, String, Text, DateTime, Index
from sqlalchemy.orm import Mapped, mapped_column

from scenebook.models.base import Base, new_id, utc_now

class Scene(Base):
    """
    Scene within a movie.

    `number` is dense within a movie (1..N). It is kept that way by the
    ordering helpers rather than by a unique constraint, since the bulk
    shift statements pass through transient duplicates.
    """
    __tablename__ = 'scenes'

    # Columns
    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=new_id
    )

    movie_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey('movies.id'),
        nullable=False,
        index=True
    )

    number: Mapped[int] = mapped_column(
        Integer,
        nullable=False
    )

    act: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    ie_flag: Mapped[Optional[str]] = mapped_column(String(2), nullable=True)
    sl_flag: Mapped[Optional[str]] = mapped_column(String(2), nullable=True)
    type: Mapped[Optional[str]] = mapped_column(String(1), nullable=True)

    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    sub_location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    weather: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    time: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    exp_length: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        comment='Expected length in minutes'
    )

    num_extras: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    camera_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    lighting_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    sound_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    color_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    prop_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    other_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    relevance_quotient: Mapped[Optional[str]] = mapped_column(String(1), nullable=True)
    cost_quotient: Mapped[Optional[str]] = mapped_column(String(1), nullable=True)

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
        Index('ix_scenes_movie_number', 'movie_id', 'number'),
    )

    NOTE_FIELDS = (
        'camera_notes',
        'lighting_notes',
        'sound_notes',
        'color_notes',
        'prop_notes',
        'other_notes',
    )

    def __repr__(self) -> str:
        return f"<Scene #{self.number} movie={self.movie_id}>"
