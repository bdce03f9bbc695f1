from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from sqlalchemy.orm import as_declarative


def new_id() -> str:
    """String surrogate key used by every table."""
    return str(uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@as_declarative()
class Base:
    """Base class for all database models.

    Each model defines its own table name and columns, including the two
    audit timestamps.
    """

    def to_dict(self) -> dict[str, Any]:
        """
        Convert model instance to dictionary.
        Excludes SQLAlchemy internal attributes and relationships.
        """
        result = {}
        for column in self.__table__.columns:
            result[column.name] = getattr(self, column.name)
        return result
