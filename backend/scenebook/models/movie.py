from datetime import datetime
from typing import Optional

from sqlalchemy import ForeignKey, String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from scenebook.models.base import Base, new_id, utc_now
from scenebook.models.enums import DEFAULT_FLAG_NO

class Movie(Base):
    """
    Movie owned by a user. Exactly one of a user's movies carries
    default_flag 'Y'; it is the implicit target of breakdown operations.
    """
    __tablename__ = 'movies'

    # Columns
    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=new_id
    )

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey('users.id'),
        nullable=False,
        index=True
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False
    )

    logline: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True
    )

    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True
    )

    default_flag: Mapped[str] = mapped_column(
        String(1),
        nullable=False,
        default=DEFAULT_FLAG_NO,
        comment='Y for the user\'s current movie, N otherwise'
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
        return f"<Movie {self.name} default={self.default_flag}>"
