from datetime import datetime
from typing import Optional

from sqlalchemy import ForeignKey, Integer, String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from scenebook.models.base import Base, new_id, utc_now

class Character(Base):
    """Character within a movie."""
    __tablename__ = 'characters'

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

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False
    )

    gender: Mapped[str] = mapped_column(
        String(1),
        nullable=False,
        comment='M, F or O'
    )

    lower_age: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True
    )

    upper_age: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True
    )

    type: Mapped[str] = mapped_column(
        String(1),
        nullable=False,
        comment='Main, Primary, Secondary, Tertiary or Other'
    )

    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True
    )

    exp_screen_time: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        comment='Expected screen time in minutes'
    )

    notes: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True
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
        return f"<Character {self.name} type={self.type}>"
